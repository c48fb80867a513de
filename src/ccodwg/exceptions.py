"""
Exceptions that are used throughout
"""

from __future__ import annotations

import difflib
from collections.abc import Collection, Iterable
from typing import Any


class UnrecognisedValueError(ValueError):
    """
    Raised when a value is not recognised
    """

    def __init__(
        self,
        unrecognised_value: Any,
        name: str,
        known_values: Collection[Any],
    ) -> None:
        """
        Initialise the error

        Parameters
        ----------
        unrecognised_value
            The value that was not recognised

        name
            The name of the thing that was being looked up

        known_values
            The values that we do recognise
        """
        error_msg = f"{unrecognised_value!r} is not a recognised value for {name}. "

        close = difflib.get_close_matches(
            str(unrecognised_value), [str(v) for v in known_values]
        )
        if close:
            suggestions = " or ".join(repr(v) for v in close)
            error_msg += f"Did you mean {suggestions}? "

        error_msg += f"The full list of known values is: {sorted(known_values)}"

        super().__init__(error_msg)


class MalformedDateError(ValueError):
    """
    Raised when a date string does not match the expected format
    """

    def __init__(
        self,
        malformed: Iterable[Any],
        date_format: str,
        source: str,
    ) -> None:
        """
        Initialise the error

        Parameters
        ----------
        malformed
            Values that could not be parsed

        date_format
            Format the values were expected to be in

        source
            Description of where the values came from
        """
        error_msg = (
            f"Dates in {source} do not match the expected format {date_format!r}. "
            f"Malformed values: {sorted(set(str(v) for v in malformed))}"
        )
        super().__init__(error_msg)


class NonNumericValueError(ValueError):
    """
    Raised when a value is neither a missing marker nor a non-negative integer
    """

    def __init__(self, invalid: Iterable[Any], source: str) -> None:
        """
        Initialise the error

        Parameters
        ----------
        invalid
            Values that could not be interpreted as counts

        source
            Description of where the values came from
        """
        error_msg = (
            f"Values in {source} are not non-negative integer counts "
            "or missing markers. "
            f"Invalid values: {sorted(set(str(v) for v in invalid))}"
        )
        super().__init__(error_msg)


class MissingReferenceMappingError(ValueError):
    """
    Raised when a region has no entry in the region hierarchy
    """

    def __init__(
        self,
        missing: Iterable[Any],
        region_columns: Iterable[str],
        source: str,
    ) -> None:
        """
        Initialise the error

        Parameters
        ----------
        missing
            Region keys which are not in the hierarchy

        region_columns
            Names of the columns that make up the region key

        source
            Description of where the region keys came from
        """
        error_msg = (
            f"The following regions in {source} have no entry "
            f"in the region hierarchy ({list(region_columns)}): {list(missing)}"
        )
        super().__init__(error_msg)


class DuplicateObservationError(ValueError):
    """
    Raised when a single source reports more than one value for the same region-date
    """

    def __init__(self, duplicates: Any, source: str) -> None:
        """
        Initialise the error

        Parameters
        ----------
        duplicates
            The duplicated rows

        source
            Description of where the rows came from
        """
        error_msg = f"Duplicate observations in {source}:\n{duplicates}"
        super().__init__(error_msg)
