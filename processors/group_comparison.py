# =============================================================================
# processors/group_comparison.py - Imported vs compare group workflow
# =============================================================================

from dataclasses import dataclass, field
from typing import List, Union
import logging

from core.member_set import MemberSet
from core.models import ComparisonConfig, FlagRow, ProcessingStats, SideBySideRow
from core.resolver import GroupResolver
from processors.comparison import fieldnames_for, format_rows
from processors.set_builder import MemberSetBuilder
from utils.csv_utils import CSVHandler


@dataclass
class ComparisonResult:
    """Everything computed during one comparison run"""
    imported: MemberSet
    compare: MemberSet
    rows: List[Union[FlagRow, SideBySideRow]] = field(default_factory=list)
    imported_stats: ProcessingStats = field(default_factory=ProcessingStats)
    compare_stats: ProcessingStats = field(default_factory=ProcessingStats)


class GroupComparisonProcessor:
    """Builds imported and compare member sets and writes the comparison report"""

    def __init__(self, resolver: GroupResolver, config: ComparisonConfig):
        self.resolver = resolver
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> ComparisonResult:
        """Main comparison workflow"""
        self.config.validate()
        scope = "transitive" if self.config.transitive else "direct"
        self.logger.info(
            f"Starting {self.config.mode.value} comparison using {scope} membership"
        )

        group_names = CSVHandler.read_group_names(
            self.config.input_path, self.config.group_column_name, self.config.sheet_name
        )

        imported_builder = MemberSetBuilder(self.resolver, label="imported")
        imported = imported_builder.build_set(group_names, self.config.transitive)

        compare_builder = MemberSetBuilder(self.resolver, label="compare")
        compare = compare_builder.build_set(self.config.compare_group_names, self.config.transitive)

        rows = format_rows(self.config.mode, imported, compare)
        CSVHandler.write_report(
            [row.to_dict() for row in rows],
            self.config.output_path,
            fieldnames_for(self.config.mode)
        )

        imported_builder.log_statistics()
        compare_builder.log_statistics()
        self.logger.info(
            f"Imported members: {len(imported)}, compare members: {len(compare)}, "
            f"report rows: {len(rows)}"
        )

        return ComparisonResult(
            imported=imported,
            compare=compare,
            rows=rows,
            imported_stats=imported_builder.stats,
            compare_stats=compare_builder.stats
        )
