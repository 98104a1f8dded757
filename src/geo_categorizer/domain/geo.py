import math
from collections.abc import Iterable

from geo_categorizer.models import HistoricalTransaction, NearbyTransaction

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_METERS = 500.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance in meters between two points given in degrees.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c * 1000


def filter_nearby(
    latitude: float,
    longitude: float,
    history: Iterable[HistoricalTransaction],
    radius_meters: float = DEFAULT_RADIUS_METERS,
) -> list[NearbyTransaction]:
    nearby: list[NearbyTransaction] = []
    for tx in history:
        distance = haversine_distance(latitude, longitude, tx.latitude, tx.longitude)
        if distance <= radius_meters:
            nearby.append(
                NearbyTransaction(
                    category=tx.category,
                    amount=tx.amount,
                    distance=distance,
                    datetime=tx.datetime,
                )
            )
    return nearby
