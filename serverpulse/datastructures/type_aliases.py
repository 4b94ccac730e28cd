"""
Semantic type aliases for ServerPulse.

Roster and snapshot documents are plain JSON-shaped data so that presentation
metadata the engine does not understand passes through untouched. These
aliases name what each piece of that data means.
"""

from typing import Any, TypeAlias

# Identity
ServerId: TypeAlias = str
CategoryName: TypeAlias = str

# Time
Timestamp: TypeAlias = float
LatencyMs: TypeAlias = int
TimeoutMs: TypeAlias = int
DurationMilliseconds: TypeAlias = float

# Network
UrlString: TypeAlias = str
HostAddress: TypeAlias = str
PortNumber: TypeAlias = int
HttpStatusCode: TypeAlias = int

# Documents
JsonPayload: TypeAlias = Any  # decoded JSON body of a status endpoint, or None
ServerDescriptor: TypeAlias = dict[str, Any]
CategoryList: TypeAlias = list[ServerDescriptor]
RosterDocument: TypeAlias = dict[CategoryName, Any]
JsonDocument: TypeAlias = dict[str, Any]

# Display text
PlayerCountText: TypeAlias = str
