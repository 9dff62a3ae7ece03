"""Script to load the demo account and a week of sample data into the database."""

import asyncio
from datetime import datetime, timedelta, timezone

from auth import DuplicateUserError, create_user, get_user_by_username
from db import db_session, init_db

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "password"
DEMO_NAME = "Youness Saber"

# (type, notes, days ago)
EMOTIONS = [
    ("stressed", "Feeling overwhelmed with work", 5),
    ("worried", "Concerned about upcoming bills", 3),
    ("happy", "Got a promotion!", 3),
    ("content", "Feeling calm and balanced today", 1),
]

# (amount, description, category, days ago, linked emotion)
TRANSACTIONS = [
    (-64.32, "Whole Foods Market", "grocery", 1, "content"),
    (-32.50, "Cinema City", "entertainment", 3, "worried"),
    (1450.00, "Paycheck Deposit", "income", 3, "happy"),
    (-128.75, "Online Shopping", "shopping", 5, "stressed"),
]

INSIGHTS = [
    (
        "stress-triggered",
        "Stress-Triggered Spending",
        "You've spent $312 more than usual on online shopping when you were stressed. Try setting a 24-hour "
        "waiting period for purchases over $50 when feeling stressed.",
    ),
    (
        "positive-pattern",
        "Positive Spending Pattern",
        "When you're happy, you tend to spend on healthier food options and activities. This month, 65% of your "
        "happy-state purchases were for long-term wellbeing.",
    ),
    (
        "mood-boosting",
        "Mood-Boosting Activities",
        "Spending on outdoor activities correlates with a 27% improvement in your reported mood the following "
        "day. Consider budgeting $100/month for these activities.",
    ),
]

# One value per day, oldest first, ending today.
HEALTH_SERIES = {
    "heartRate": ("bpm", [68, 65, 71, 66, 70, 64, 69], {"activityType": "resting", "confidence": "high"}),
    "sleepQuality": ("hours", [7.5, 6.8, 8.2, 7.1, 6.5, 7.9, 7.3], None),
    "recovery": ("percent", [87, 72, 91, 78, 65, 84, 80], None),
    "strain": ("score", [12.4, 8.7, 14.2, 10.1, 9.5, 13.0, 11.2], None),
    "steps": ("steps", [9742, 8651, 10124, 7896, 12385, 9278, 8431], None),
}


async def _demo_user() -> dict[str, object]:
    try:
        return await create_user(DEMO_USERNAME, DEMO_PASSWORD, name=DEMO_NAME)
    except DuplicateUserError:
        user = await get_user_by_username(DEMO_USERNAME)
        if not user:
            raise
        return user


async def seed_demo_data() -> None:
    """Replace the demo user's data with the sample set."""

    await init_db()
    user = await _demo_user()
    user_id = user["id"]
    now = datetime.now(timezone.utc)

    async with db_session() as conn:
        async with conn.transaction():
            # Clear existing rows so repeated runs stay idempotent
            await conn.execute("DELETE FROM transactions WHERE user_id = $1", user_id)
            await conn.execute("DELETE FROM emotions WHERE user_id = $1", user_id)
            await conn.execute("DELETE FROM insights WHERE user_id = $1", user_id)
            await conn.execute("DELETE FROM health_data WHERE user_id = $1", user_id)
            await conn.execute("DELETE FROM budgets WHERE user_id = $1", user_id)

            emotion_ids: dict[str, int] = {}
            for emotion_type, notes, days_ago in EMOTIONS:
                row = await conn.fetchrow(
                    """
                    INSERT INTO emotions (user_id, type, notes, date)
                    VALUES ($1, $2, $3, $4)
                    RETURNING id
                    """,
                    user_id,
                    emotion_type,
                    notes,
                    now - timedelta(days=days_ago),
                )
                emotion_ids[emotion_type] = row["id"]

            for amount, description, category, days_ago, emotion_type in TRANSACTIONS:
                await conn.execute(
                    """
                    INSERT INTO transactions (user_id, amount, description, category, currency, date, emotion_id)
                    VALUES ($1, $2, $3, $4, 'USD', $5, $6)
                    """,
                    user_id,
                    amount,
                    description,
                    category,
                    now - timedelta(days=days_ago),
                    emotion_ids.get(emotion_type),
                )

            for insight_type, title, description in INSIGHTS:
                await conn.execute(
                    """
                    INSERT INTO insights (user_id, type, title, description, date, updated_date)
                    VALUES ($1, $2, $3, $4, $5, $5)
                    """,
                    user_id,
                    insight_type,
                    title,
                    description,
                    now,
                )

            for metric, (unit, values, metadata) in HEALTH_SERIES.items():
                for offset, value in enumerate(values):
                    await conn.execute(
                        """
                        INSERT INTO health_data (user_id, type, value, unit, source, timestamp, metadata)
                        VALUES ($1, $2, $3, $4, 'appleWatch', $5, $6)
                        """,
                        user_id,
                        metric,
                        float(value),
                        unit,
                        now - timedelta(days=len(values) - 1 - offset),
                        metadata,
                    )

            await conn.execute(
                """
                INSERT INTO budgets (user_id, type, amount, category, start_date, is_active, currency)
                VALUES ($1, 'monthly', 1000, NULL, $2, TRUE, 'USD')
                """,
                user_id,
                now.replace(day=1, hour=0, minute=0, second=0, microsecond=0),
            )

    print(f"Demo data loaded for user {DEMO_USERNAME}")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
