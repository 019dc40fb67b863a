from __future__ import annotations

UNKNOWN = "Unknown"

JURISDICTIONS = ("NSW", "VIC", "QLD", "WA", "SA", "TAS", "NT", "ACT")

JURISDICTION_NAMES = {
    "NSW": "New South Wales",
    "VIC": "Victoria",
    "QLD": "Queensland",
    "WA": "Western Australia",
    "SA": "South Australia",
    "TAS": "Tasmania",
    "NT": "Northern Territory",
    "ACT": "Australian Capital Territory",
}

JURISDICTION_COLORS = {
    "NSW": "#1f77b4",
    "VIC": "#ff7f0e",
    "QLD": "#2ca02c",
    "WA": "#d62728",
    "SA": "#9467bd",
    "TAS": "#8c564b",
    "NT": "#e377c2",
    "ACT": "#7f7f7f",
}

DETECTION_METHODS = ("Camera_Issued", "Police_Issued", "Others", "Unknown")

METHOD_LABELS = {
    "Camera_Issued": "Camera Issued",
    "Police_Issued": "Police Issued",
    "Others": "Other Methods",
    "Unknown": "Unknown Methods",
}

METHOD_COLORS = {
    "Camera_Issued": "#1f77b4",
    "Police_Issued": "#ff7f0e",
    "Others": "#2ca02c",
    "Unknown": "#d62728",
}

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MONTH_ALIASES = {month[:3].lower(): month for month in MONTHS} | {"sept": "September"}

AGE_GROUPS = ("0-16", "17-25", "26-39", "40-64", "65 and over")

AGE_GROUP_ALIASES = {
    "0 - 16": "0-16",
    "under 17": "0-16",
    "17 - 25": "17-25",
    "26 - 39": "26-39",
    "40 - 64": "40-64",
    "65+": "65 and over",
    "65 +": "65 and over",
    "65 and older": "65 and over",
    "65 or over": "65 and over",
}

AGE_GROUP_COLORS = {
    "0-16": "#7FB069",
    "17-25": "#F4A261",
    "26-39": "#E76F51",
    "40-64": "#9B2C2C",
    "65 and over": "#A66DA6",
}

DEFAULT_COLOR = "#6FA8DC"
NO_DATA_COLOR = "#ffffff"
MISSING_REGION_COLOR = "#cccccc"
