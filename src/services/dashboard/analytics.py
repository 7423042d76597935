from datetime import datetime
from typing import Optional

import pandas as pd

from src.domain.derivations import is_expiring_soon, stock_status, utcnow
from src.services.store import Document
from src.utils.logging import get_logger

logger = get_logger(__name__)


def _frame(records: list[Document], columns: list[str]) -> pd.DataFrame:
    df = pd.DataFrame(records)
    for column in columns:
        if column not in df.columns:
            df[column] = None
    return df


def _mean(series: pd.Series) -> Optional[float]:
    values = pd.to_numeric(series, errors="coerce").dropna()
    return round(float(values.mean()), 2) if not values.empty else None


def build_analytics(
    animals: list[Document],
    inventory: list[Document],
    now: Optional[datetime] = None,
) -> dict:
    """
    Summarise animals and inventory for the analytics page.

    Args:
        animals: Animal documents
        inventory: Inventory item documents
        now: Reference time for expiry checks

    Returns:
        dict: health distribution, sex ratio, averages and inventory value
        per category
    """
    now = now or utcnow()
    animals_df = _frame(animals, ["status", "sex", "age", "weight", "category"])
    inventory_df = _frame(inventory, ["category", "quantity", "cost"])

    health_distribution = {
        str(status): int(count)
        for status, count in animals_df["status"].dropna().value_counts().items()
    }

    sex_counts = animals_df["sex"].dropna().astype(str).str.capitalize().value_counts()
    sex_ratio = {
        "male": int(sex_counts.get("Male", 0)),
        "female": int(sex_counts.get("Female", 0)),
    }

    if inventory_df.empty:
        value_by_category: dict[str, float] = {}
        total_value = 0.0
    else:
        values = pd.to_numeric(inventory_df["quantity"], errors="coerce").fillna(
            0
        ) * pd.to_numeric(inventory_df["cost"], errors="coerce").fillna(0)
        grouped = values.groupby(inventory_df["category"].fillna("uncategorized")).sum()
        value_by_category = {str(k): round(float(v), 2) for k, v in grouped.items()}
        total_value = round(float(values.sum()), 2)

    result = {
        "totalAnimals": len(animals),
        "totalInventoryItems": len(inventory),
        "healthDistribution": health_distribution,
        "sexRatio": sex_ratio,
        "averageAge": _mean(animals_df["age"]),
        "averageWeight": _mean(animals_df["weight"]),
        "inventoryValueByCategory": value_by_category,
        "totalInventoryValue": total_value,
        "lowStockCount": sum(1 for item in inventory if stock_status(item) == "low"),
        "expiringSoonCount": sum(1 for item in inventory if is_expiring_soon(item, now)),
    }
    logger.info(
        f"Built analytics for {len(animals)} animals and {len(inventory)} inventory items"
    )
    return result
