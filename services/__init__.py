# Service layer package
from . import (  # re-export for convenience
	analysis_service,
	analytics_service,
	budget_service,
	emotion_service,
	health_service,
	insight_service,
	transaction_service,
)

__all__ = [
	"analysis_service",
	"analytics_service",
	"budget_service",
	"emotion_service",
	"health_service",
	"insight_service",
	"transaction_service",
]
