from __future__ import annotations

from typing import Protocol, Sequence

from .model import Site


class SiteRepository(Protocol):
    def list_sites(self, *, active_only: bool = True) -> Sequence[Site]:
        raise NotImplementedError
