import io
import json
from enum import Enum
from typing import Any, Iterable, Sequence

import ruamel.yaml
import tabulate as _tabulate


class OutputFmt(Enum):
    Table = "table"
    Json = "json"
    Yaml = "yaml"

_tablefmt = "simple"
_headers = True
_outputfmt = OutputFmt.Table

def set_output_format(value: OutputFmt):
    global _outputfmt
    _outputfmt = value

def set_table_format(value: str):
    global _tablefmt
    _tablefmt = value

def set_headers(value: bool):
    global _headers
    _headers = value

def _dump_yaml(data: Any) -> str:
    yaml = ruamel.yaml.YAML(typ="safe")
    yaml.default_flow_style = False
    output = io.StringIO()
    yaml.dump(data, output)
    return output.getvalue()

def tabulate(tabular_data: Iterable[Sequence[Any]], headers: Sequence[str]) -> str:
    """Wrapper method to apply global output format settings"""
    if _outputfmt != OutputFmt.Table:
        # Structured formats key each row by its headers
        output = [dict(zip(headers, row)) for row in tabular_data]

        if _outputfmt == OutputFmt.Yaml:
            return _dump_yaml(output)
        elif _outputfmt == OutputFmt.Json:
            return json.dumps(output, indent=2)
        else:
            raise NotImplementedError("output format not implemented")

    if not _headers:
        headers = ()
    return _tabulate.tabulate(tabular_data=tabular_data, headers=headers, tablefmt=_tablefmt)
