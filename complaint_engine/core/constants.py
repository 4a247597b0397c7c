"""
Application-wide constants.
"""

from typing import Dict, List

from complaint_engine.models.base.enums import ComplaintCategory

# Complaint categories and subcategories
COMPLAINT_CATEGORIES: Dict[ComplaintCategory, List[str]] = {
    ComplaintCategory.ELECTRICAL: [
        "Lighting",
        "Power Outlets",
        "Fan/AC",
        "Electrical Appliances",
        "Switchboard",
        "Wiring Issues",
        "UPS/Inverter",
        "Other Electrical",
    ],
    ComplaintCategory.CIVIL: [
        "Plumbing",
        "Drainage",
        "Wall/Ceiling",
        "Flooring",
        "Carpentry",
        "Painting",
        "Doors/Windows",
        "Water Supply",
        "Other Civil",
    ],
    ComplaintCategory.MISC: [
        "Housekeeping",
        "Garden/Landscape",
        "Security",
        "Parking",
        "Facilities",
        "Pest Control",
        "Internet/Network",
        "Common Area",
        "Other",
    ],
}

COMPLAINT_NUMBER_PREFIX = "CMP"
COMPLAINT_NUMBER_PATTERN = r"^CMP-\d{2}-\d{2}-\d{4,}$"

SUBMISSION_NOTE = "Complaint submitted"
NOTIFICATION_EVENT_TYPE = "complaint"


def subcategories_for(category: ComplaintCategory) -> List[str]:
    """Return the subcategory list for a category"""
    return list(COMPLAINT_CATEGORIES[ComplaintCategory(category)])
