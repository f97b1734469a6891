"""Load the people shown on the cards from a CSV export.

Only the number of rows matters to the layouts; the remaining columns feed
the visualizer (card colour and labels).
"""
from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import requests

log = logging.getLogger(__name__)

DEFAULT_ACCENT = "#111827"
ACCENT_LOW = "#EF3D22"
ACCENT_MID = "#FDCA35"
ACCENT_HIGH = "#3A9F4B"

_FILLS = {
    ACCENT_LOW: "rgba(59, 15, 11, 0.75)",
    ACCENT_MID: "rgba(59, 47, 6, 0.75)",
    ACCENT_HIGH: "rgba(5, 46, 22, 0.75)",
}
_DEFAULT_FILL = "rgba(2, 6, 23, 0.75)"

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]+")


class DatasetError(Exception):
    pass


@dataclass(frozen=True)
class Person:
    name: str
    country: str = ""
    age: str = ""
    interest: str = ""
    net_worth: str = ""
    photo: str = ""

    @property
    def country_code(self) -> str:
        return self.country[:2].upper()


def _get(row: Dict[str, Optional[str]], *keys: str) -> str:
    for key in keys:
        v = row.get(key)
        if v is None:
            continue
        v = str(v).strip()
        if v:
            return v
    return ""


def parse_people(text: str) -> List[Person]:
    reader = csv.DictReader(io.StringIO(text))
    people: List[Person] = []
    for row in reader:
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        name = _get(row, "Name", "name", "Full Name")
        if not name:
            continue
        people.append(
            Person(
                name=name,
                country=_get(row, "Country", "country"),
                age=_get(row, "Age", "age"),
                interest=_get(row, "Interest", "interest"),
                # Spreadsheet exports keep the padded header " Net Worth ".
                net_worth=_get(row, " Net Worth ", "Net Worth", "Net worth", "netWorth", "networth"),
                photo=_get(row, "Photo", "photo", "Image"),
            )
        )
    return people


def _read_source(source: str, *, timeout: float) -> str:
    if source.startswith(("http://", "https://")):
        try:
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            log.debug("fetch of %s failed: %s", source, e)
            raise DatasetError(f"failed to fetch {source}: {e}") from e
        return resp.content.decode("utf-8-sig")

    p = Path(source).expanduser()
    try:
        return p.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise DatasetError(f"failed to read {p}: {e}") from e


def load_people(source: str, *, timeout: float = 15.0) -> List[Person]:
    """Read people from a CSV path or http(s) URL; rows without a name are skipped."""

    text = _read_source(source, timeout=timeout)
    try:
        people = parse_people(text)
    except csv.Error as e:
        raise DatasetError(f"malformed CSV in {source}: {e}") from e
    log.info("loaded %d people from %s", len(people), source)
    return people


def net_worth_accent(value: Optional[str]) -> str:
    if not value or not isinstance(value, str):
        return DEFAULT_ACCENT
    numeric = _NON_NUMERIC_RE.sub("", value)
    try:
        amount = float(numeric)
    except ValueError:
        return DEFAULT_ACCENT
    if amount != amount or amount in (float("inf"), float("-inf")):
        return DEFAULT_ACCENT

    if amount < 100_000:
        return ACCENT_LOW
    if amount > 200_000:
        return ACCENT_HIGH
    return ACCENT_MID


def fill_color(accent: str) -> str:
    return _FILLS.get(accent, _DEFAULT_FILL)


def index_hue(index: int) -> float:
    """Hue in degrees for cards without a photo, spread by the golden angle."""

    return (index * 137.5) % 360.0
