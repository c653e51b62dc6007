"""
Core types for the DoiT Console analytics API.

These dataclasses mirror the JSON bodies exchanged with the API. Wire keys
are camelCase; optional members left as None are omitted from request bodies.
"""

from dataclasses import dataclass, field
from typing import Any


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in data.items() if v is not None}


def _dump_list(items: list | None) -> list[dict[str, Any]] | None:
    if items is None:
        return None
    return [item.to_dict() for item in items]


# =============================================================================
# Attribution Types
# =============================================================================


@dataclass
class Component:
    """A filter component of an attribution."""

    type: str
    key: str
    values: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Component":
        """Create from API response dict."""
        return cls(
            type=data.get("type", ""),
            key=data.get("key", ""),
            values=list(data.get("values") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"type": self.type, "key": self.key, "values": self.values}


@dataclass
class Attribution:
    """A cost attribution."""

    name: str
    formula: str = ""
    description: str = ""
    components: list[Component] = field(default_factory=list)
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attribution":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            formula=data.get("formula") or "",
            description=data.get("description") or "",
            components=[Component.from_dict(c) for c in data.get("components") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result: dict[str, Any] = {}
        if self.id:
            result["id"] = self.id
        result["name"] = self.name
        if self.description:
            result["description"] = self.description
        result["formula"] = self.formula
        result["components"] = [c.to_dict() for c in self.components]
        return result


# =============================================================================
# Attribution Group Types
# =============================================================================


def project_member_ids(members: list[Any] | None) -> list[str]:
    """
    Collapse a list of nested attribution records to their ids.

    The read endpoint returns full attribution objects where writes take a
    list of ids. Plain string entries are kept as-is; order is preserved.
    """
    ids = []
    for member in members or []:
        if isinstance(member, dict):
            ids.append(member["id"])
        elif isinstance(member, str):
            ids.append(member)
        else:
            raise TypeError(f"Unexpected attribution entry: {member!r}")
    return ids


@dataclass
class AttributionGroup:
    """A group of attributions."""

    name: str
    description: str = ""
    attributions: list[str] = field(default_factory=list)
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttributionGroup":
        """Create from API response dict (either the read or the write shape)."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            description=data.get("description") or "",
            attributions=project_member_ids(data.get("attributions")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result: dict[str, Any] = {}
        if self.id:
            result["id"] = self.id
        result["name"] = self.name
        if self.description:
            result["description"] = self.description
        result["attributions"] = list(self.attributions)
        return result


# =============================================================================
# Report Configuration Types
# =============================================================================


@dataclass
class AdvancedAnalysis:
    """Advanced analysis toggles. Each can be set independently."""

    forecast: bool = False
    not_trending: bool = False
    trending_down: bool = False
    trending_up: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdvancedAnalysis":
        """Create from API response dict."""
        return cls(
            forecast=bool(data.get("forecast", False)),
            not_trending=bool(data.get("notTrending", False)),
            trending_down=bool(data.get("trendingDown", False)),
            trending_up=bool(data.get("trendingUp", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {
            "forecast": self.forecast,
            "notTrending": self.not_trending,
            "trendingDown": self.trending_down,
            "trendingUp": self.trending_up,
        }


@dataclass
class Metric:
    """A metric, e.g. {"type": "basic", "value": "cost"}."""

    type: str
    value: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metric":
        """Create from API response dict."""
        return cls(type=data.get("type", ""), value=data.get("value", ""))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"type": self.type, "value": self.value}


@dataclass
class Dimension:
    """A report dimension, e.g. {"id": "sku_description", "type": "fixed"}."""

    id: str
    type: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dimension":
        """Create from API response dict."""
        return cls(id=data.get("id", ""), type=data.get("type", ""))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"id": self.id, "type": self.type}


@dataclass
class ConfigFilter:
    """
    A report filter.

    When filtering on attributions both id and type are "attribution" and
    values holds the attribution ids.
    """

    id: str
    type: str
    values: list[str] = field(default_factory=list)
    inverse: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigFilter":
        """Create from API response dict."""
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            values=list(data.get("values") or []),
            inverse=bool(data.get("inverse", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"id": self.id, "inverse": self.inverse, "type": self.type, "values": self.values}


@dataclass
class Limit:
    """Top/bottom-N limit on a group."""

    value: int
    sort: str = ""
    metric: Metric | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Limit":
        """Create from API response dict."""
        metric = data.get("metric")
        return cls(
            value=int(data.get("value", 0)),
            sort=data.get("sort", ""),
            metric=Metric.from_dict(metric) if metric else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "metric": self.metric.to_dict() if self.metric else None,
                "sort": self.sort,
                "value": self.value,
            }
        )


@dataclass
class Group:
    """A row grouping in the report."""

    id: str
    type: str
    limit: Limit | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Group":
        """Create from API response dict."""
        limit = data.get("limit")
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            limit=Limit.from_dict(limit) if limit else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "id": self.id,
                "type": self.type,
                "limit": self.limit.to_dict() if self.limit else None,
            }
        )


@dataclass
class MetricFilter:
    """Filter on a metric value, e.g. cost > 50."""

    metric: Metric
    operator: str
    values: list[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetricFilter":
        """Create from API response dict."""
        return cls(
            metric=Metric.from_dict(data.get("metric") or {}),
            operator=data.get("operator", ""),
            values=[float(v) for v in data.get("values") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"metric": self.metric.to_dict(), "operator": self.operator, "values": self.values}


@dataclass
class Origin:
    """Origin of a split. Only "attribution" is supported as type."""

    id: str
    type: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Origin":
        """Create from API response dict."""
        return cls(id=data.get("id", ""), type=data.get("type", ""))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"id": self.id, "type": self.type}


@dataclass
class SplitTarget:
    """
    Target of a split.

    value is a fraction (0.3 for 30%) and is only meaningful in custom mode.
    """

    id: str
    type: str
    value: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SplitTarget":
        """Create from API response dict."""
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            value=float(data.get("value", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {"id": self.id, "type": self.type, "value": self.value}


@dataclass
class Split:
    """A cost split. Only "attribution_group" is supported as type."""

    id: str
    type: str
    mode: str = ""
    include_origin: bool = False
    origin: Origin | None = None
    targets: list[SplitTarget] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Split":
        """Create from API response dict."""
        origin = data.get("origin")
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            mode=data.get("mode", ""),
            include_origin=bool(data.get("includeOrigin", False)),
            origin=Origin.from_dict(origin) if origin else None,
            targets=[SplitTarget.from_dict(t) for t in data.get("targets") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "id": self.id,
                "includeOrigin": self.include_origin,
                "mode": self.mode,
                "origin": self.origin.to_dict() if self.origin else None,
                "targets": [t.to_dict() for t in self.targets],
                "type": self.type,
            }
        )


@dataclass
class TimeSettings:
    """
    Time range of a report.

    With mode "last", amount 2 and unit "day" on April 17th the range is
    April 15th-16th, or April 16th-17th when include_current is set.
    """

    mode: str
    unit: str
    amount: int = 0
    include_current: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeSettings":
        """Create from API response dict."""
        return cls(
            mode=data.get("mode", ""),
            unit=data.get("unit", ""),
            amount=int(data.get("amount", 0)),
            include_current=bool(data.get("includeCurrent", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {
            "amount": self.amount,
            "includeCurrent": self.include_current,
            "mode": self.mode,
            "unit": self.unit,
        }


@dataclass
class ReportConfig:
    """Report configuration."""

    advanced_analysis: AdvancedAnalysis | None = None
    aggregation: str | None = None
    currency: str | None = None
    dimensions: list[Dimension] | None = None
    display_values: str | None = None
    filters: list[ConfigFilter] | None = None
    group: list[Group] | None = None
    # Requires time interval "month", "quarter" or "year" when set
    include_promotional_credits: bool | None = None
    layout: str | None = None
    metric: Metric | None = None
    metric_filter: MetricFilter | None = None
    splits: list[Split] | None = None
    time_interval: str | None = None
    time_range: TimeSettings | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReportConfig":
        """Create from API response dict."""

        def nested(key: str, parser: Any) -> Any:
            value = data.get(key)
            return parser(value) if value is not None else None

        def nested_list(key: str, parser: Any) -> Any:
            value = data.get(key)
            return [parser(item) for item in value] if value is not None else None

        return cls(
            advanced_analysis=nested("advancedAnalysis", AdvancedAnalysis.from_dict),
            aggregation=data.get("aggregation"),
            currency=data.get("currency"),
            dimensions=nested_list("dimensions", Dimension.from_dict),
            display_values=data.get("displayValues"),
            filters=nested_list("filters", ConfigFilter.from_dict),
            group=nested_list("group", Group.from_dict),
            include_promotional_credits=data.get("includePromotionalCredits"),
            layout=data.get("layout"),
            metric=nested("metric", Metric.from_dict),
            metric_filter=nested("metricFilter", MetricFilter.from_dict),
            splits=nested_list("splits", Split.from_dict),
            time_interval=data.get("timeInterval"),
            time_range=nested("timeRange", TimeSettings.from_dict),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return _compact(
            {
                "advancedAnalysis": self.advanced_analysis.to_dict() if self.advanced_analysis else None,
                "aggregation": self.aggregation,
                "currency": self.currency,
                "dimensions": _dump_list(self.dimensions),
                "displayValues": self.display_values,
                "filters": _dump_list(self.filters),
                "group": _dump_list(self.group),
                "includePromotionalCredits": self.include_promotional_credits,
                "layout": self.layout,
                "metric": self.metric.to_dict() if self.metric else None,
                "metricFilter": self.metric_filter.to_dict() if self.metric_filter else None,
                "splits": _dump_list(self.splits),
                "timeInterval": self.time_interval,
                "timeRange": self.time_range.to_dict() if self.time_range else None,
            }
        )


# =============================================================================
# Report Types
# =============================================================================


@dataclass
class Report:
    """A saved analytics report."""

    name: str
    description: str = ""
    config: ReportConfig = field(default_factory=ReportConfig)
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Report":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            description=data.get("description") or "",
            config=ReportConfig.from_dict(data.get("config") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result: dict[str, Any] = {}
        if self.id:
            result["id"] = self.id
        result["name"] = self.name
        if self.description:
            result["description"] = self.description
        result["config"] = self.config.to_dict()
        return result
