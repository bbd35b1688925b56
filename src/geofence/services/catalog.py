"""In-memory catalog of delivery areas with copy-on-write snapshots."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from ..errors import AreaInactiveError, AreaNotFoundError, NoBoundaryError, NoDeliveryZoneError
from ..models.domain import Area, BoundingBox, DeliveryZone
from .geospatial import require_valid_coordinate


@dataclass(frozen=True, slots=True)
class ActiveZones:
    """Restartable view over the active (area, zone) pairs of one snapshot."""

    areas: tuple[Area, ...]

    def __iter__(self) -> Iterator[tuple[Area, DeliveryZone]]:
        for area in self.areas:
            zone = area.zone
            if area.is_active and zone is not None and zone.is_active:
                yield area, zone


@dataclass(frozen=True, slots=True)
class CatalogSnapshot:
    """Immutable catalog state; every catalog mutation publishes a new one."""

    version: int = 0
    by_id: Mapping[str, Area] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.by_id)

    def areas(self) -> tuple[Area, ...]:
        return tuple(self.by_id.values())

    def get(self, area_id: str) -> Optional[Area]:
        return self.by_id.get(area_id)

    def active_zones(self) -> ActiveZones:
        return ActiveZones(self.areas())


def _check_zone_activation(area: Area, zone: DeliveryZone) -> None:
    if not zone.is_active:
        return
    if not area.boundary.has_boundary:
        raise NoBoundaryError(area.id)
    if not area.is_active:
        raise AreaInactiveError(area.id)


def _zone_was_active(area: Optional[Area]) -> bool:
    return area is not None and area.zone is not None and area.zone.is_active


class ZoneCatalog:
    """Process-wide read model of areas and their delivery zones.

    Readers take :meth:`snapshot` once and work on it; writers are serialized and
    replace the snapshot wholesale, so a reader never observes a partial update.
    """

    def __init__(self, bounds: Optional[BoundingBox] = None, areas: Iterable[Area] = ()) -> None:
        self.bounds = bounds
        self._lock = threading.Lock()
        self._snapshot = CatalogSnapshot()
        if areas:
            self.replace_all(areas)

    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def areas(self) -> tuple[Area, ...]:
        return self._snapshot.areas()

    def get_area(self, area_id: str) -> Area:
        area = self._snapshot.get(area_id)
        if area is None:
            raise AreaNotFoundError(area_id)
        return area

    def all_active_zones(self) -> ActiveZones:
        return self._snapshot.active_zones()

    def _validate(self, area: Area) -> None:
        require_valid_coordinate(area.center, self.bounds)
        for ring in area.boundary.rings:
            for point in ring.vertices:
                require_valid_coordinate(point, self.bounds)
        if area.zone is not None:
            if area.zone.area_id != area.id:
                raise ValueError(f"Delivery zone '{area.zone.id}' belongs to area '{area.zone.area_id}', not '{area.id}'.")
            if area.zone.is_active and not area.boundary.has_boundary:
                raise NoBoundaryError(area.id)

    def _publish(self, by_id: dict[str, Area]) -> CatalogSnapshot:
        self._snapshot = CatalogSnapshot(version=self._snapshot.version + 1, by_id=MappingProxyType(by_id))
        return self._snapshot

    def replace_all(self, areas: Iterable[Area]) -> CatalogSnapshot:
        """Bulk load persisted areas; areas that no longer validate are skipped."""
        by_id: dict[str, Area] = {}
        for area in areas:
            try:
                self._validate(area)
            except ValueError as e:
                logging.warning(f"Skipping area {area.id} ('{area.name}') on catalog load: {e}")
                continue
            by_id[area.id] = area
        with self._lock:
            snapshot = self._publish(by_id)
        logging.info(f"Loaded {len(by_id)} areas into zone catalog (version {snapshot.version})")
        return snapshot

    def upsert_area(self, area: Area) -> Area:
        self._validate(area)
        now = datetime.now(timezone.utc)
        with self._lock:
            existing = self._snapshot.get(area.id)
            if area.zone is not None and not _zone_was_active(existing):
                _check_zone_activation(area, area.zone)
            stored = replace(
                area,
                created_at=area.created_at or (existing.created_at if existing else None) or now,
                updated_at=now,
            )
            by_id = dict(self._snapshot.by_id)
            by_id[area.id] = stored
            self._publish(by_id)
        logging.info(f"{'Updated' if existing else 'Created'} area {area.id} ('{area.name}')")
        return stored

    def remove_area(self, area_id: str) -> Area:
        with self._lock:
            by_id = dict(self._snapshot.by_id)
            removed = by_id.pop(area_id, None)
            if removed is None:
                raise AreaNotFoundError(area_id)
            self._publish(by_id)
        logging.info(f"Removed area {area_id} and its delivery zone")
        return removed

    def _mutate(self, area_id: str, change) -> Area:
        with self._lock:
            current = self._snapshot.get(area_id)
            if current is None:
                raise AreaNotFoundError(area_id)
            updated = replace(change(current), updated_at=datetime.now(timezone.utc))
            by_id = dict(self._snapshot.by_id)
            by_id[area_id] = updated
            self._publish(by_id)
        return updated

    def set_zone(self, area_id: str, zone: DeliveryZone) -> Area:
        if zone.area_id != area_id:
            raise ValueError(f"Delivery zone '{zone.id}' belongs to area '{zone.area_id}', not '{area_id}'.")

        def attach(area: Area) -> Area:
            _check_zone_activation(area, zone)
            return replace(area, zone=zone)

        updated = self._mutate(area_id, attach)
        logging.info(f"Configured delivery zone {zone.id} for area {area_id} (active={zone.is_active})")
        return updated

    def set_zone_active(self, area_id: str, active: bool) -> Area:
        def toggle(area: Area) -> Area:
            if area.zone is None:
                raise NoDeliveryZoneError(area.id)
            zone = replace(area.zone, is_active=active)
            _check_zone_activation(area, zone)
            return replace(area, zone=zone)

        updated = self._mutate(area_id, toggle)
        logging.info(f"Delivery zone for area {area_id} set active={active}")
        return updated

    def set_area_active(self, area_id: str, active: bool) -> Area:
        updated = self._mutate(area_id, lambda area: replace(area, is_active=active))
        logging.info(f"Area {area_id} set active={active}")
        return updated
