"""Platform condition parsing for cargo ``target`` dependency tables."""

from crateindex.platform.predicate import (
    CfgAll,
    CfgAny,
    CfgFlag,
    CfgNot,
    CfgValue,
    PlatformExpr,
    PlatformPredicate,
)

__all__ = [
    "CfgAll",
    "CfgAny",
    "CfgFlag",
    "CfgNot",
    "CfgValue",
    "PlatformExpr",
    "PlatformPredicate",
]
