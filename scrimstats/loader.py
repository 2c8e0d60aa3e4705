"""
loader.py
=========
Ingests exported match files into the in-memory stores.

Each ``*.json`` file in the data directory holds one match; the file stem is the
match id (``YYYY-MM-DD-<n>``, official games carry extra ``-`` segments). Files
are processed one at a time, in name order:

  1. skip ids already stored with a raw payload
  2. assemble the Match and store it
  3. fold it into every participant's lifetime totals
  4. resolve the winning side/team against the roster
  5. record it in each represented team's match ledger

Unreadable files are logged and skipped; ingestion never stops on one bad file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from scrimstats.aggregator import PlayerAggregator
from scrimstats.match_assembler import MatchAssembler
from scrimstats.roster import TeamRoster
from scrimstats.store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    data_dir: str
    files_seen: int = 0
    already_processed: int = 0
    ingested: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class DataLoader:
    def __init__(self, store: DataStore, roster: TeamRoster, data_dir: Union[str, Path],
                 assembler: Optional[MatchAssembler] = None,
                 aggregator: Optional[PlayerAggregator] = None):
        self.store = store
        self.roster = roster
        self.data_dir = Path(data_dir)
        self.assembler = assembler or MatchAssembler()
        self.aggregator = aggregator or PlayerAggregator(
            store, self.assembler, team_for_name=roster.team_id_for_name
        )
        self.last_report: Optional[IngestReport] = None

    def match_files(self) -> List[Path]:
        try:
            return sorted(p for p in self.data_dir.iterdir() if p.is_file() and p.suffix == '.json')
        except OSError as exc:
            logger.error("Cannot read data directory %s: %s", self.data_dir, exc)
            return []

    def load_json(self, path: Path) -> Optional[Any]:
        try:
            with path.open(encoding='utf-8') as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Skipping %s: %s", path.name, exc)
            return None

    def load_new_matches(self) -> List[str]:
        """Ingest every match file not yet processed. Returns the new match ids."""
        logger.info("Loading new matches from %s", self.data_dir)
        report = IngestReport(data_dir=str(self.data_dir))

        for path in self.match_files():
            report.files_seen += 1
            match_id = path.stem
            if self.assembler.is_processed(match_id, self.store.matches):
                report.already_processed += 1
                continue

            raw = self.load_json(path)
            if raw is None:
                report.failed.append(match_id)
                continue

            self.ingest(raw, match_id)
            report.ingested.append(match_id)

        self.last_report = report
        logger.info("Ingested %s new matches (%s already loaded, %s failed).",
                    len(report.ingested), report.already_processed, len(report.failed))
        return report.ingested

    def ingest(self, raw: Any, match_id: str) -> None:
        match = self.assembler.assemble(raw, match_id)
        self.store.matches.set(match)
        self.aggregator.update_from_match(match)
        for player_id in match.player_ids:
            self.roster.assign_player(player_id)
        self.assembler.resolve_victory(match, self.roster.team_id_for_player)
        self.roster.record_match(match)
