# =============================================================================
# processors/comparison.py - Combine imported and compare sets into rows
# =============================================================================

from typing import List, Union

from core.member_set import MemberSet
from core.models import ComparisonMode, FlagRow, SideBySideRow


def format_flag_mode(imported: MemberSet, compare: MemberSet) -> List[FlagRow]:
    """
    One row per imported member, in discovery order.

    InCompareGroups holds the compare set's casing of the member when it is
    present (case-insensitively) and is empty otherwise. Compare-only members do not
    produce rows.
    """
    return [
        FlagRow(AllImportedMembers=member,
                InCompareGroups=compare.get(member) or "")
        for member in imported
    ]


def format_side_by_side(imported: MemberSet, compare: MemberSet) -> List[SideBySideRow]:
    """
    Two independently sorted columns, padded to equal length.

    Row position carries no relation between the columns.
    """
    imported_sorted = imported.sorted()
    compare_sorted = compare.sorted()
    row_count = max(len(imported_sorted), len(compare_sorted))

    rows = []
    for i in range(row_count):
        rows.append(SideBySideRow(
            ImportedGroupMembers=imported_sorted[i] if i < len(imported_sorted) else "",
            CompareGroupMembers=compare_sorted[i] if i < len(compare_sorted) else ""
        ))
    return rows


def format_rows(mode: ComparisonMode, imported: MemberSet,
                compare: MemberSet) -> List[Union[FlagRow, SideBySideRow]]:
    """Format rows for the selected comparison mode"""
    if mode == ComparisonMode.SIDE_BY_SIDE:
        return format_side_by_side(imported, compare)
    return format_flag_mode(imported, compare)


def fieldnames_for(mode: ComparisonMode) -> List[str]:
    """CSV header for the selected comparison mode"""
    if mode == ComparisonMode.SIDE_BY_SIDE:
        return SideBySideRow.FIELDNAMES
    return FlagRow.FIELDNAMES
