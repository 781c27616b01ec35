from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Site
from .repository import SiteRepository


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_sites(self, *, active_only: bool = True) -> Sequence[Site]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT site_id, site_name, client_name, location, manager_name, is_active
                FROM sites
                {where}
                ORDER BY site_name ASC
                """
            )
            return [
                Site(
                    site_id=str(r["site_id"]),
                    site_name=str(r["site_name"]),
                    client_name=r.get("client_name"),
                    location=r.get("location"),
                    manager_name=r.get("manager_name"),
                    is_active=bool(r["is_active"]),
                )
                for r in fetchall(cur)
            ]
