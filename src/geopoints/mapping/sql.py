"""
SQL-backed Mapper.

The radius query embeds the spherical law of cosines in the WHERE clause and
scans the whole table:

    acos(sin(φ0)·sin(φ) + cos(φ0)·cos(φ)·cos(λ - λ0)) · R <= radius

Origin coordinates and radius are bound parameters; only the earth radius is a
literal. Table and column names come from `SQLConf` and go through the dialect's
identifier quoting.
The cosine is clamped to [-1, 1] (`least`/`greatest`, or `min`/`max` on SQLite)
before `acos` so a row sitting exactly on the origin still matches.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Mapping

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Dialect, Engine
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlalchemy.sql.elements import TextClause

from geopoints.config.settings import SQLConf, get_sql_conf
from geopoints.core.errors import BackendQueryError
from geopoints.core.geo import EARTH_RADIUS_KM, Point

logger = logging.getLogger(__name__)


def build_radius_query(
    conf: SQLConf,
    origin: Point,
    radius_km: float,
    *,
    dialect: Dialect | None = None,
) -> tuple[TextClause, dict[str, float]]:
    """Build the brute-force radius query and its bound parameters."""
    preparer = (dialect or DefaultDialect()).identifier_preparer
    table = preparer.quote(conf.table)
    lat_col = f"{table}.{preparer.quote(conf.lat_col)}"
    lng_col = f"{table}.{preparer.quote(conf.lng_col)}"

    lat_term = f"sin(radians(:lat))*sin(radians({lat_col}))"
    lng_term = f"cos(radians(:lat))*cos(radians({lat_col}))*cos(radians({lng_col}) - radians(:lng))"
    # Coincident points can push the acos argument a hair past 1.
    lo, hi = ("max", "min") if dialect is not None and dialect.name == "sqlite" else ("greatest", "least")
    cosine = f"{hi}(1.0, {lo}(-1.0, {lat_term} + {lng_term}))"
    sql = f"SELECT * FROM {table} WHERE acos({cosine}) * {EARTH_RADIUS_KM!r} <= :radius"

    params = {"lat": float(origin.lat), "lng": float(origin.lng), "radius": float(radius_km)}
    return text(sql), params


def _null_safe(fn: Callable[[float], float]) -> Callable[[float | None], float | None]:
    def wrapper(value: float | None) -> float | None:
        return None if value is None else fn(value)

    return wrapper


def _install_sqlite_math(engine: Engine) -> None:
    """Register the trigonometric functions the radius query needs on SQLite."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):  # noqa: ANN001
        dbapi_connection.create_function("sin", 1, _null_safe(math.sin), deterministic=True)
        dbapi_connection.create_function("cos", 1, _null_safe(math.cos), deterministic=True)
        dbapi_connection.create_function("acos", 1, _null_safe(math.acos), deterministic=True)
        dbapi_connection.create_function("radians", 1, _null_safe(math.radians), deterministic=True)


class SQLMapper:
    """A Mapper that runs the radius query through SQLAlchemy."""

    def __init__(self, conf: SQLConf, engine: Engine | None = None):
        self._conf = conf
        if engine is None:
            engine = create_engine(conf.url())
            if engine.dialect.name == "sqlite":
                _install_sqlite_math(engine)
        self._engine = engine

    @property
    def conf(self) -> SQLConf:
        return self._conf

    @property
    def engine(self) -> Engine:
        return self._engine

    def points_within_radius(self, origin: Point, radius_km: float) -> list[dict[str, Any]]:
        query, params = build_radius_query(self._conf, origin, radius_km, dialect=self._engine.dialect)
        logger.debug(
            "Radius query on %s: lat=%.6f lng=%.6f radius_km=%s",
            self._conf.table,
            origin.lat,
            origin.lng,
            radius_km,
        )
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(query, params).mappings().all()
        except SQLAlchemyError as exc:
            logger.warning("Radius query on %s failed: %s", self._conf.table, exc)
            raise BackendQueryError(f"Radius query on '{self._conf.table}' failed: {exc}") from exc
        return [dict(row) for row in rows]

    def point_from_row(self, row: Mapping[str, Any]) -> Point:
        """Decode a result row into a Point using the configured columns."""
        try:
            return Point(lat=float(row[self._conf.lat_col]), lng=float(row[self._conf.lng_col]))
        except (KeyError, TypeError, ValueError) as exc:
            raise BackendQueryError(
                f"Row has no usable '{self._conf.lat_col}'/'{self._conf.lng_col}' columns"
            ) from exc

    def close(self) -> None:
        self._engine.dispose()

    def __enter__(self) -> SQLMapper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def handle_with_sql(conf: SQLConf | None = None) -> SQLMapper:
    """Build a SQLMapper from `conf`, or from `get_sql_conf()` when omitted.

    Raises:
        ConfigurationError: If the configuration file is present but invalid.
        BackendQueryError: If no engine can be created for the configured URL.
    """
    if conf is None:
        conf = get_sql_conf()
    try:
        mapper = SQLMapper(conf)
    except (ArgumentError, NoSuchModuleError, ImportError) as exc:
        raise BackendQueryError(f"Cannot create a '{conf.driver}' engine: {exc}") from exc
    logger.info("SQL mapper ready: driver=%s table=%s", conf.driver, conf.table)
    return mapper
