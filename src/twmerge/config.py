from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MergerConfig:
    keep_sort: bool = False  # keep input order instead of sorting the result
    use_cache: bool = True
    properties_path: str | None = None  # defaults to the bundled properties.json
