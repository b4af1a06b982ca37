from typing import Dict

from gdziestoja.db.sqlite_connector import run_sql

TABLES = ("urls", "posts", "comments")


def count_rows() -> Dict[str, int]:
    """Row counts per table, e.g. {"urls": 4, "posts": 1, "comments": 2}."""
    stats: Dict[str, int] = {}
    for table in TABLES:
        res = run_sql(f"SELECT count(*) AS cnt FROM {table}")
        stats[table] = (res[0].get("cnt") if res else 0) or 0
    return stats
