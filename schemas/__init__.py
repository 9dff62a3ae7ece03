# Pydantic models package for the tracking domains

from . import analysis_schema, budget_schema, emotion_schema, health_schema, insight_schema, transaction_schema

__all__ = [
	"analysis_schema",
	"budget_schema",
	"emotion_schema",
	"health_schema",
	"insight_schema",
	"transaction_schema",
]
