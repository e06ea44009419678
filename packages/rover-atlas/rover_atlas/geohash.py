"""Geohash encode/decode and neighbor lookup."""
from __future__ import annotations

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_BITS = (16, 8, 4, 2, 1)

NEIGHBORS: dict[str, dict[str, str]] = {
    "right": {"even": "bc01fg45238967deuvhjyznpkmstqrwx", "odd": "p0r21436x8zb9dcf5h7kjnmqesgutwvy"},
    "left": {"even": "238967debc01fg45kmstqrwxuvhjyznp", "odd": "14365h7k9dcfesgujnmqp0r2twvyx8zb"},
    "top": {"even": "p0r21436x8zb9dcf5h7kjnmqesgutwvy", "odd": "bc01fg45238967deuvhjyznpkmstqrwx"},
    "bottom": {"even": "14365h7k9dcfesgujnmqp0r2twvyx8zb", "odd": "238967debc01fg45kmstqrwxuvhjyznp"},
}

BORDERS: dict[str, dict[str, str]] = {
    "right": {"even": "bcfguvyz", "odd": "prxz"},
    "left": {"even": "0145hjnp", "odd": "028b"},
    "top": {"even": "prxz", "odd": "bcfguvyz"},
    "bottom": {"even": "028b", "odd": "0145hjnp"},
}


def encode(lat: float, lon: float, precision: int = 7) -> str:
    """Interleave longitude/latitude bisections, 5 bits per character."""
    if precision < 1:
        raise ValueError(f"precision must be >= 1, got {precision}")
    lat_lo, lat_hi = -90.0, 90.0
    lon_lo, lon_hi = -180.0, 180.0
    chars: list[str] = []
    idx = 0
    bit = 0
    even = True
    while len(chars) < precision:
        if even:
            mid = (lon_lo + lon_hi) / 2
            if lon >= mid:
                idx = idx * 2 + 1
                lon_lo = mid
            else:
                idx = idx * 2
                lon_hi = mid
        else:
            mid = (lat_lo + lat_hi) / 2
            if lat >= mid:
                idx = idx * 2 + 1
                lat_lo = mid
            else:
                idx = idx * 2
                lat_hi = mid
        even = not even
        bit += 1
        if bit == 5:
            chars.append(BASE32[idx])
            bit = 0
            idx = 0
    return "".join(chars)


def bounds(tile_id: str) -> tuple[float, float, float, float]:
    """Return ``(lat_min, lat_max, lon_min, lon_max)`` of a geohash cell."""
    lat_lo, lat_hi = -90.0, 90.0
    lon_lo, lon_hi = -180.0, 180.0
    even = True
    for ch in tile_id.lower():
        cd = BASE32.index(ch)
        for mask in _BITS:
            if even:
                mid = (lon_lo + lon_hi) / 2
                if cd & mask:
                    lon_lo = mid
                else:
                    lon_hi = mid
            else:
                mid = (lat_lo + lat_hi) / 2
                if cd & mask:
                    lat_lo = mid
                else:
                    lat_hi = mid
            even = not even
    return lat_lo, lat_hi, lon_lo, lon_hi


def decode(tile_id: str) -> tuple[float, float]:
    """Centre ``(lat, lon)`` of a geohash cell."""
    lat_lo, lat_hi, lon_lo, lon_hi = bounds(tile_id)
    return (lat_lo + lat_hi) / 2, (lon_lo + lon_hi) / 2


def adjacent(tile_id: str, direction: str) -> str:
    """Neighbor in one of ``top|bottom|right|left``; recurses at cell borders."""
    if direction not in NEIGHBORS:
        raise ValueError(f"unknown direction {direction!r}")
    if not tile_id:
        raise ValueError("tile_id must be non-empty")
    tile_id = tile_id.lower()
    last = tile_id[-1]
    parity = "odd" if len(tile_id) % 2 else "even"
    base = tile_id[:-1]
    if last in BORDERS[direction][parity] and base:
        base = adjacent(base, direction)
    return base + BASE32[NEIGHBORS[direction][parity].index(last)]


def neighbors(tile_id: str) -> dict[str, str]:
    n = adjacent(tile_id, "top")
    s = adjacent(tile_id, "bottom")
    e = adjacent(tile_id, "right")
    w = adjacent(tile_id, "left")
    return {
        "n": n,
        "s": s,
        "e": e,
        "w": w,
        "ne": adjacent(n, "right"),
        "nw": adjacent(n, "left"),
        "se": adjacent(s, "right"),
        "sw": adjacent(s, "left"),
    }


OPPOSITE = {"n": "s", "s": "n", "e": "w", "w": "e",
            "ne": "sw", "sw": "ne", "nw": "se", "se": "nw"}
