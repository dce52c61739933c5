"""
Generation Trace Logger.

Records the step-by-step decisions of a generation run:
1. Lifecycle Phases (Loading, per-file Rewriting, Sidecar).
2. Symbol decisions (kept as alias, kept as forwarder, excluded with reason).
3. Import actions (resolved, dropped, emitted).

The output is a structured list of event dictionaries suitable for JSON
serialization (`go-gen-proxy generate --json-trace`).
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  SYMBOL_KEPT = "symbol_kept"
  SYMBOL_EXCLUDED = "symbol_excluded"
  IMPORT_ACTION = "import_action"
  FILE_SKIPPED = "file_skipped"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records generation events.
  Designed to be injected into the Engine and the proxy rewriters.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []  # Stack of phase IDs

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g., 'File client.go'). Returns Phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None

    event = TraceEvent(
      id=phase_id,
      type=TraceEventType.PHASE_START,
      timestamp=time.time(),
      description=name,
      parent_id=parent,
      metadata={"detail": description},
    )
    self._events.append(event)
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self):
    """Ends the current active phase."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    event = TraceEvent(
      id=str(uuid.uuid4()),
      type=TraceEventType.PHASE_END,
      timestamp=time.time(),
      description="End Phase",
      parent_id=phase_id,
    )
    self._events.append(event)

  def log_kept(self, symbol: str, kind: str):
    """Logs a symbol that made it into the proxy (`kind` is e.g. 'forwarder', 'alias')."""
    self._log_simple(TraceEventType.SYMBOL_KEPT, f"Kept {symbol}", {"symbol": symbol, "kind": kind})

  def log_excluded(self, symbol: str, reason: str):
    self._log_simple(TraceEventType.SYMBOL_EXCLUDED, f"Excluded {symbol}", {"symbol": symbol, "reason": reason})

  def log_import(self, action: str, path: str, alias: Optional[str] = None):
    """Logs an import decision (`action` is 'resolved', 'dropped' or 'emitted')."""
    self._log_simple(
      TraceEventType.IMPORT_ACTION,
      f"Import {action}: {path}",
      {"action": action, "path": path, "alias": alias},
    )

  def log_file_skipped(self, file_name: str, reason: str):
    self._log_simple(TraceEventType.FILE_SKIPPED, f"Skipped {file_name}", {"file": file_name, "reason": reason})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]):
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def events_of(self, evt_type: TraceEventType) -> List[TraceEvent]:
    return [e for e in self._events if e.type == evt_type]

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]


# Global/Contextual instance for ease of access from the rewriters.
_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer():
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
