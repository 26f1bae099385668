from __future__ import annotations

import re

DATE_KEY_FORMAT = "%Y-%m-%d"
DATE_KEY_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})$")
TIME_PATTERN = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")
MONTH_FILTER_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{1,2})$")
YEAR_PATTERN = re.compile(r"^[0-9]{4}$")

TSV_HEADER = ("Day", "Since", "Till", "Hours")
REPORT_FILENAME = "work-summary-{year}-{month}.html"
