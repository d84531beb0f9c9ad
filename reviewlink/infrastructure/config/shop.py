"""
Shop Locations
==============

Store locations offered by the review form. The form posts the `value`;
prompts use the human-readable `label`.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ShopLocation:
    value: str
    label: str
    address: str


SHOP_LOCATIONS = (
    ShopLocation("mumbai_mg_road", "Mumbai - M.G. Road", "123 M.G. Road, Mumbai"),
    ShopLocation("mumbai_bandra", "Mumbai - Bandra West", "45 Hill Road, Bandra, Mumbai"),
    ShopLocation("mumbai_andheri", "Mumbai - Andheri East", "78 Andheri Kurla Road, Mumbai"),
    ShopLocation("pune_fc_road", "Pune - F.C. Road", "256 F.C. Road, Pune"),
    ShopLocation("pune_camp", "Pune - Camp", "89 M.G. Road, Camp, Pune"),
    ShopLocation("delhi_karol_bagh", "Delhi - Karol Bagh", "45 Ajmal Khan Road, Karol Bagh, Delhi"),
    ShopLocation("delhi_south_ext", "Delhi - South Extension", "12 South Extension Part I, Delhi"),
    ShopLocation("bangalore_brigade", "Bangalore - Brigade Road", "78 Brigade Road, Bangalore"),
    ShopLocation("bangalore_indiranagar", "Bangalore - Indiranagar", "34 100 Feet Road, Indiranagar, Bangalore"),
    ShopLocation("hyderabad_banjara", "Hyderabad - Banjara Hills", "23 Road No. 1, Banjara Hills, Hyderabad"),
    ShopLocation("chennai_t_nagar", "Chennai - T. Nagar", "67 North Usman Road, T. Nagar, Chennai"),
    ShopLocation("kolkata_park_st", "Kolkata - Park Street", "15 Park Street, Kolkata"),
)

_LABELS = {location.value: location.label for location in SHOP_LOCATIONS}


def location_label(value: Optional[str]) -> Optional[str]:
    """Label for a location value; unknown values are returned unchanged."""
    if not value:
        return None
    return _LABELS.get(value, value)
