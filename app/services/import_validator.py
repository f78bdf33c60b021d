"""
Import Validator
Header aliasing, cell normalization, and per-row validation for bulk
certificate imports (CSV / spreadsheet rows)
"""

import re
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set

from app.schemas.imports import ImportRowData, ValidatedImportRow
from app.utils.certificates import normalize_certificate_number

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DD_MM_YYYY_PATTERN = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")

# Accepted in addition to ISO 8601 dates and timestamps
TEXT_DATE_FORMATS = (
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)

WITHIN_FILE_DUPLICATE = "certificateNumber must be unique within file"
EXISTING_DUPLICATE = "certificateNumber must be unique"


class ImportValidator:
    """Turns a header row plus data rows into validated import rows"""

    # Compared after removing whitespace and lower-casing; first column wins
    HEADER_ALIASES = {
        "participant_name": ["participantname", "participant name", "name"],
        "participant_email": ["participantemail", "participant email", "email"],
        "event_name": ["eventname", "event name", "event"],
        "event_start_date": ["eventstartdate", "event start date", "start date", "startdate"],
        "event_end_date": ["eventenddate", "event end date", "end date", "enddate"],
        "certificate_number": ["certificatenumber", "certificate number"],
    }

    @staticmethod
    def normalize_header(header) -> str:
        if header is None:
            return ""
        text = str(header).lstrip("\ufeff")
        return re.sub(r"\s+", "", text).lower()

    @classmethod
    def map_columns(cls, headers: Sequence) -> Dict[str, int]:
        normalized = [cls.normalize_header(h) for h in headers]
        column_map = {}
        for field, aliases in cls.HEADER_ALIASES.items():
            wanted = {cls.normalize_header(a) for a in aliases}
            for position, header in enumerate(normalized):
                if header in wanted:
                    column_map[field] = position
                    break
        return column_map

    @staticmethod
    def parse_cell(value) -> str:
        """Coerce a raw cell (str, number, date, None) to a trimmed string"""
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if value != value:  # NaN
                return ""
            return str(int(value)) if value.is_integer() else repr(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()[:10]
        return str(value).strip()

    @staticmethod
    def parse_flexible_date(value: str) -> str:
        """Rewrite dd-mm-yyyy to yyyy-mm-dd; anything else passes through trimmed"""
        if not value or not value.strip():
            return ""
        text = value.strip()
        match = DD_MM_YYYY_PATTERN.match(text)
        if match:
            day, month, year = match.groups()
            return f"{year}-{month}-{day}"
        return text

    @staticmethod
    def _parse_date(text: str) -> Optional[date]:
        candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            return datetime.fromisoformat(candidate).date()
        except ValueError:
            pass
        for fmt in TEXT_DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return None

    @classmethod
    def is_valid_date_str(cls, value: str) -> bool:
        if not value or not value.strip():
            return False
        return cls._parse_date(cls.parse_flexible_date(value)) is not None

    @staticmethod
    def is_valid_email(value: str) -> bool:
        if not value or not value.strip():
            return True
        return EMAIL_PATTERN.match(value.strip()) is not None

    @classmethod
    def _normalized_date_value(cls, raw: str) -> str:
        # Valid dd-mm-yyyy values are kept in their ISO form for the preview
        rewritten = cls.parse_flexible_date(raw)
        if rewritten != raw and cls._parse_date(rewritten) is not None:
            return rewritten
        return raw

    @classmethod
    def _extract(cls, row: Sequence, column_map: Dict[str, int]) -> Dict[str, str]:
        values = {}
        for field in cls.HEADER_ALIASES:
            position = column_map.get(field)
            raw = row[position] if position is not None and position < len(row) else None
            values[field] = cls.parse_cell(raw)
        return values

    @classmethod
    def _build_data(cls, values: Dict[str, str]) -> ImportRowData:
        return ImportRowData(
            participant_name=values["participant_name"],
            participant_email=values["participant_email"] or None,
            event_name=values["event_name"],
            event_start_date=cls._normalized_date_value(values["event_start_date"]),
            event_end_date=cls._normalized_date_value(values["event_end_date"]),
            certificate_number=normalize_certificate_number(values["certificate_number"]) or None,
        )

    @classmethod
    def validate_row(
        cls,
        row: Sequence,
        index: int,
        column_map: Dict[str, int],
        existing_numbers: Set[str],
        seen_in_file: Set[str],
    ) -> ValidatedImportRow:
        """
        Validate one data row

        Args:
            row: Raw cells of the row
            index: Row position in the file (header is row 1)
            column_map: Field name -> column position
            existing_numbers: Upper-cased numbers already issued (read-only)
            seen_in_file: Upper-cased numbers used by earlier rows of this file (read-only)

        Returns:
            Validated row; never raises for malformed cells
        """
        values = cls._extract(row, column_map)
        data = cls._build_data(values)
        certificate_number = data.certificate_number

        if certificate_number and certificate_number in seen_in_file:
            return ValidatedImportRow(
                index=index, data=data, is_valid=False, errors=[WITHIN_FILE_DUPLICATE]
            )

        errors = []
        if not values["participant_name"]:
            errors.append("participantName is required")
        if not values["event_name"]:
            errors.append("eventName is required")

        if not values["event_start_date"]:
            errors.append("eventStartDate is required")
        elif not cls.is_valid_date_str(values["event_start_date"]):
            errors.append("eventStartDate must be a valid date")

        if not values["event_end_date"]:
            errors.append("eventEndDate is required")
        elif not cls.is_valid_date_str(values["event_end_date"]):
            errors.append("eventEndDate must be a valid date")

        if values["participant_email"] and not cls.is_valid_email(values["participant_email"]):
            errors.append("participantEmail must be a valid email")

        if certificate_number and certificate_number in existing_numbers:
            errors.append(EXISTING_DUPLICATE)

        return ValidatedImportRow(index=index, data=data, is_valid=not errors, errors=errors)

    @classmethod
    def validate_rows(
        cls,
        rows: Sequence[Sequence],
        existing_numbers: Optional[Iterable[str]] = None,
    ) -> List[ValidatedImportRow]:
        """Validate every data row; the first row is the header"""
        if len(rows) < 2:
            return []

        column_map = cls.map_columns(rows[0])
        existing = {normalize_certificate_number(n) for n in (existing_numbers or ())}
        seen_in_file: Set[str] = set()
        results = []

        for index, row in enumerate(rows[1:], start=2):
            result = cls.validate_row(row, index, column_map, existing, seen_in_file)
            if result.data.certificate_number:
                seen_in_file.add(result.data.certificate_number)
            results.append(result)

        return results


def validate_import(rows: Sequence[Sequence], existing_numbers: Optional[Iterable[str]] = None) -> List[ValidatedImportRow]:
    """Validate an imported table (header row first)"""
    return ImportValidator.validate_rows(rows, existing_numbers)
