# ddrconf/tables/loader.py
# TimingLoader -- loads and validates one side's register tables.
#
# Two input formats are accepted:
#   JSON  -- {"format_version": "1.0.0", "ddrc_cfg": [[reg, val], ...], ...}
#            Entries are [reg, val] pairs or {"reg": .., "val": ..} objects.
#            Numbers are ints or strings such as "0x3d400304".
#   Dump  -- the text format written by DumpWriter (ddrconfdump). Declared
#            entry counts, sizes and CRCs are verified against the rows.
#
# Every hard failure raises RuntimeError whose message starts with a
# failure_type_id from the FAILURE_TYPES registry:
#   INTEGRITY_FAILURE -- file missing or unreadable, CRC mismatch.
#   DATA_CORRUPTION   -- malformed content, out-of-width value, bad counts.

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ddrconf.engine.checksum import table_crc
from ddrconf.engine.domain import Entry, Sequence, WidthClass, width_policy
from ddrconf.engine.exceptions import RegisterValidationError
from ddrconf.tables.timing import FspCfg, FspMsg, FwType, TimingConfig
from ddrconf.tool_version import STORAGE_FORMAT_VERSION


_TOP_LEVEL_TABLES: Dict[str, WidthClass] = {
    "ddrc_cfg":           WidthClass.CONTROLLER,
    "ddrphy_cfg":         WidthClass.PHY,
    "ddrphy_trained_csr": WidthClass.PHY,
    "ddrphy_pie":         WidthClass.PHY,
}
_FSP_MSG_TABLES: Tuple[str, ...] = ("fsp_phy_cfg", "fsp_phy_msgh_cfg", "fsp_phy_pie_cfg")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _parse_int(value: Any, where: str) -> int:
    """Accept an int or a decimal/0x-prefixed string. Reject bool and float."""
    if isinstance(value, bool):
        raise RuntimeError(f"DATA_CORRUPTION: {where}: boolean is not a register number.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 0)
        except ValueError:
            pass
    raise RuntimeError(f"DATA_CORRUPTION: {where}: cannot parse {value!r} as an integer.")


def _make_entry(address: int, value: int, width_class: WidthClass, where: str) -> Entry:
    try:
        return Entry(address, value, width_class)
    except RegisterValidationError as exc:
        raise RuntimeError(f"DATA_CORRUPTION: {where}: {exc.message}") from exc


def _parse_fw_type(value: Any, where: str) -> FwType:
    if isinstance(value, str) and value in FwType.__members__:
        return FwType[value]
    number = _parse_int(value, where)
    try:
        return FwType(number)
    except ValueError:
        raise RuntimeError(f"DATA_CORRUPTION: {where}: unknown fw_type {number}.")


# ---------------------------------------------------------------------------
# JSON format
# ---------------------------------------------------------------------------

def _load_json_table(raw: Any, width_class: WidthClass, table: str) -> Sequence:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise RuntimeError(f"DATA_CORRUPTION: table '{table}' must be a list of entries.")
    entries = []
    for index, item in enumerate(raw):
        where = f"{table}[{index}]"
        if isinstance(item, dict):
            if "reg" not in item or "val" not in item:
                raise RuntimeError(f"DATA_CORRUPTION: {where}: entry needs 'reg' and 'val'.")
            reg, val = item["reg"], item["val"]
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            reg, val = item
        else:
            raise RuntimeError(f"DATA_CORRUPTION: {where}: malformed entry {item!r}.")
        entries.append(_make_entry(
            _parse_int(reg, where + ".reg"),
            _parse_int(val, where + ".val"),
            width_class,
            where,
        ))
    return tuple(entries)


def _load_json_groups(payload: dict, key: str) -> List[dict]:
    raw = payload.get(key, [])
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(g, dict) for g in raw):
        raise RuntimeError(f"DATA_CORRUPTION: '{key}' must be a list of objects.")
    return raw


def _load_json(payload: Any, name: str) -> TimingConfig:
    if not isinstance(payload, dict):
        raise RuntimeError("DATA_CORRUPTION: timing file must contain a JSON object.")

    if payload.get("format_version") != STORAGE_FORMAT_VERSION:
        raise RuntimeError(
            f"DATA_CORRUPTION: format_version mismatch. "
            f"File: {payload.get('format_version')}, "
            f"Expected: {STORAGE_FORMAT_VERSION}."
        )

    tables = {
        key: _load_json_table(payload.get(key), width_class, key)
        for key, width_class in _TOP_LEVEL_TABLES.items()
    }

    fsp_cfg = []
    for i, group in enumerate(_load_json_groups(payload, "fsp_cfg")):
        prefix = f"fsp_cfg[{i}]"
        fsp_cfg.append(FspCfg(
            ddrc_cfg=_load_json_table(group.get("ddrc_cfg"), WidthClass.CONTROLLER, prefix + ".ddrc_cfg"),
            bypass=_parse_int(group.get("bypass", 0), prefix + ".bypass"),
        ))

    fsp_msg = []
    for i, group in enumerate(_load_json_groups(payload, "fsp_msg")):
        prefix = f"fsp_msg[{i}]"
        phy_tables = {
            key: _load_json_table(group.get(key), WidthClass.PHY, f"{prefix}.{key}")
            for key in _FSP_MSG_TABLES
        }
        fsp_msg.append(FspMsg(
            drate=_parse_int(group.get("drate", 0), prefix + ".drate"),
            fw_type=_parse_fw_type(group.get("fw_type", 0), prefix + ".fw_type"),
            **phy_tables,
        ))

    return TimingConfig(
        name=str(payload.get("name") or name),
        fsp_cfg=tuple(fsp_cfg),
        fsp_msg=tuple(fsp_msg),
        **tables,
    )


# ---------------------------------------------------------------------------
# Dump format
# ---------------------------------------------------------------------------

_NAME_RE = re.compile(
    r"^(?:(ddrc_cfg|ddrphy_cfg|ddrphy_trained_csr|ddrphy_pie)"
    r"|fsp_cfg\[(\d+)\]\.(ddrc_cfg)"
    r"|fsp_msg\[(\d+)\]\.(fsp_phy_cfg|fsp_phy_msgh_cfg|fsp_phy_pie_cfg))$"
)
_HEADER_RE = re.compile(r"^entries=(\d+), size=(\d+) bytes$")
_CRC_RE    = re.compile(r"^crc32=0x([0-9a-fA-F]{1,8})$")
_ROW_RE    = re.compile(r"^\[\s*(\d+)\]=\{0x([0-9a-fA-F]+), 0x([0-9a-fA-F]+)\}$")
_SCALAR_RE = re.compile(r"^(fsp_cfg|fsp_msg)\[(\d+)\]\.(bypass|drate|fw_type)=(-?\d+)$")
_BANNER_TITLES = ("DDR Configuration Dump Tool", "DUMP COMPLETE")


class _DumpTable:
    """Rows of one table being parsed, with the declared header values."""

    def __init__(self, key: Tuple, width_class: WidthClass, label: str, line_no: int):
        self.key         = key
        self.width_class = width_class
        self.label       = label
        self.line_no     = line_no
        self.entries:  Optional[int] = None
        self.size:     Optional[int] = None
        self.crc:      Optional[int] = None
        self.rows:     List[Entry]   = []

    def finish(self) -> Sequence:
        seq = tuple(self.rows)
        if self.entries is None or self.crc is None:
            raise RuntimeError(
                f"DATA_CORRUPTION: table '{self.label}' (line {self.line_no}) "
                "is missing its entries/crc32 header."
            )
        if self.entries != len(seq):
            raise RuntimeError(
                f"DATA_CORRUPTION: table '{self.label}' declares entries={self.entries} "
                f"but contains {len(seq)} rows."
            )
        policy = width_policy(self.width_class)
        if self.size != len(seq) * policy.entry_bytes:
            raise RuntimeError(
                f"DATA_CORRUPTION: table '{self.label}' declares size={self.size} bytes, "
                f"expected {len(seq) * policy.entry_bytes}."
            )
        actual = table_crc(seq, policy)
        if actual != self.crc:
            raise RuntimeError(
                f"INTEGRITY_FAILURE: table '{self.label}' CRC mismatch. "
                f"Declared 0x{self.crc:08x}, computed 0x{actual:08x}."
            )
        return seq


class _DumpParser:

    def __init__(self, name: str):
        self._name = name
        self._tables:  Dict[Tuple, Sequence]      = {}
        self._scalars: Dict[Tuple, int]           = {}
        self._current: Optional[_DumpTable]       = None

    def _close(self) -> None:
        if self._current is not None:
            self._tables[self._current.key] = self._current.finish()
            self._current = None

    def _open(self, match: "re.Match", line: str, line_no: int) -> None:
        self._close()
        top, fsp_idx, fsp_table, msg_idx, msg_table = match.groups()
        if top is not None:
            key = ("top", top)
            width_class = _TOP_LEVEL_TABLES[top]
        elif fsp_idx is not None:
            key = ("fsp_cfg", int(fsp_idx), fsp_table)
            width_class = WidthClass.CONTROLLER
        else:
            key = ("fsp_msg", int(msg_idx), msg_table)
            width_class = WidthClass.PHY
        if key in self._tables:
            raise RuntimeError(f"DATA_CORRUPTION: table '{line}' appears twice (line {line_no}).")
        self._current = _DumpTable(key, width_class, line, line_no)

    def feed(self, line: str, line_no: int) -> None:
        if not line or line.startswith("═") or line in _BANNER_TITLES:
            return

        match = _NAME_RE.match(line)
        if match:
            self._open(match, line, line_no)
            return

        match = _SCALAR_RE.match(line)
        if match:
            self._close()
            group, index, field_name, number = match.groups()
            self._scalars[(group, int(index), field_name)] = int(number)
            return

        table = self._current
        if table is not None:
            match = _HEADER_RE.match(line)
            if match and table.entries is None:
                table.entries, table.size = int(match.group(1)), int(match.group(2))
                return
            match = _CRC_RE.match(line)
            if match and table.crc is None:
                table.crc = int(match.group(1), 16)
                return
            match = _ROW_RE.match(line)
            if match and table.crc is not None:
                index = int(match.group(1))
                if index != len(table.rows):
                    raise RuntimeError(
                        f"DATA_CORRUPTION: table '{table.label}' row index {index} "
                        f"out of sequence at line {line_no}."
                    )
                where = f"{table.label}[{index}]"
                table.rows.append(_make_entry(
                    int(match.group(2), 16), int(match.group(3), 16), table.width_class, where,
                ))
                return

        raise RuntimeError(f"DATA_CORRUPTION: unrecognised dump line {line_no}: {line!r}")

    def _group_count(self, group: str) -> int:
        indices = {key[1] for key in self._tables if key[0] == group}
        indices |= {key[1] for key in self._scalars if key[0] == group}
        if indices != set(range(len(indices))):
            raise RuntimeError(
                f"DATA_CORRUPTION: {group} indices are not contiguous: {sorted(indices)}."
            )
        return len(indices)

    def result(self) -> TimingConfig:
        self._close()
        tables = self._tables

        fsp_cfg = tuple(
            FspCfg(
                ddrc_cfg=tables.get(("fsp_cfg", i, "ddrc_cfg"), ()),
                bypass=self._scalars.get(("fsp_cfg", i, "bypass"), 0),
            )
            for i in range(self._group_count("fsp_cfg"))
        )

        fsp_msg = []
        for i in range(self._group_count("fsp_msg")):
            where = f"fsp_msg[{i}].fw_type"
            fsp_msg.append(FspMsg(
                drate=self._scalars.get(("fsp_msg", i, "drate"), 0),
                fw_type=_parse_fw_type(self._scalars.get(("fsp_msg", i, "fw_type"), 0), where),
                **{key: tables.get(("fsp_msg", i, key), ()) for key in _FSP_MSG_TABLES},
            ))

        return TimingConfig(
            name=self._name,
            fsp_cfg=fsp_cfg,
            fsp_msg=tuple(fsp_msg),
            **{key: tables.get(("top", key), ()) for key in _TOP_LEVEL_TABLES},
        )


def _load_dump(text: str, name: str) -> TimingConfig:
    parser = _DumpParser(name)
    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        parser.feed(raw_line.strip(), line_no)
    return parser.result()


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

class TimingLoader:
    """
    Loads one TimingConfig from a JSON timing file or a ddrconfdump dump.

    The format is detected from content: a document starting with "{" is
    JSON, anything else is parsed as a dump.
    """

    def load(self, filepath: Path) -> TimingConfig:
        """
        Load and validate filepath.

        Raises RuntimeError with failure_type_id prefix on any hard failure.
        """
        filepath = Path(filepath)
        if not filepath.is_file():
            raise RuntimeError(
                f"INTEGRITY_FAILURE: Timing file not found: {filepath}"
            )

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise RuntimeError(
                f"INTEGRITY_FAILURE: Failed to read timing file {filepath}: {exc}"
            ) from exc

        return self.loads(text, name=filepath.name)

    def loads(self, text: str, name: str = "") -> TimingConfig:
        """Parse timing tables from a string. Same failure contract as load()."""
        if text.lstrip().startswith("{"):
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise RuntimeError(
                    f"INTEGRITY_FAILURE: Failed to parse timing JSON {name}: {exc}"
                ) from exc
            return _load_json(payload, name)
        return _load_dump(text, name)
