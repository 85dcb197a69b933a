from dataclasses import dataclass, field
from typing import Dict, Optional

HTTP_REQUEST_HEADER_MATCHER = "httpRequestHeaderMatcher"

STREAMS = {"upstream", "downstream"}

# Attribute keys each toxic type requires, exactly.
TOXIC_ATTRIBUTES = {
    "latency": {"latency", "jitter"},
    "bandwidth": {"rate"},
    "slow_close": {"delay"},
    "timeout": {"timeout"},
    "slicer": {"average_size", "size_variation", "delay"},
    "limit_data": {"bytes"},
}


@dataclass
class ToxicCondition:
    """Restricts a toxic to the requests a matcher accepts."""

    matcher_type: str
    matcher_parameters: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def http_request_header_matcher(cls, header_key, header_value_regex):
        return cls(
            HTTP_REQUEST_HEADER_MATCHER,
            {"headerKey": header_key, "headerValueRegex": header_value_regex},
        )

    def to_dict(self):
        return {
            "matcherType": self.matcher_type,
            "matcherParameters": dict(self.matcher_parameters),
        }

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        return cls(data["matcherType"], dict(data.get("matcherParameters") or {}))


@dataclass
class ToxicConfig:
    """Config of a toxic, as sent to and echoed by the server."""

    name: str
    type: str
    stream: str
    toxicity: float
    attributes: Dict[str, int] = field(default_factory=dict)
    condition: Optional[ToxicCondition] = None

    @classmethod
    def new(cls, type, stream, toxicity, attributes, condition=None):
        """Build a validated toxic named after its type and stream."""
        validate(type, stream, toxicity, attributes)
        return cls(f"{type}_{stream}", type, stream, toxicity, dict(attributes), condition)

    def to_dict(self):
        return {
            "name": self.name,
            "type": self.type,
            "stream": self.stream,
            "toxicity": self.toxicity,
            "attributes": dict(self.attributes),
            "condition": self.condition.to_dict() if self.condition is not None else None,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data["name"],
            type=data["type"],
            stream=data["stream"],
            toxicity=data["toxicity"],
            attributes=dict(data.get("attributes") or {}),
            condition=ToxicCondition.from_dict(data.get("condition")),
        )


def validate(type, stream, toxicity, attributes):
    if type not in TOXIC_ATTRIBUTES:
        raise ValueError(f"Invalid toxic type: {type}. Must be one of {sorted(TOXIC_ATTRIBUTES)}")
    if stream not in STREAMS:
        raise ValueError(f"Invalid stream: {stream}. Must be one of {sorted(STREAMS)}")
    if isinstance(toxicity, bool) or not isinstance(toxicity, (int, float)) or not 0.0 <= toxicity <= 1.0:
        raise ValueError(f"Invalid toxicity: {toxicity}. Must be within [0.0, 1.0]")

    expected = TOXIC_ATTRIBUTES[type]
    if set(attributes) != expected:
        raise ValueError(f"Toxic '{type}' takes attributes {sorted(expected)}, got {sorted(attributes)}")
    for key, value in attributes.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"Attribute '{key}' must be a non-negative integer, got {value!r}")
