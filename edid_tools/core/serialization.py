"""
Helpers for serializing decoded EDID records to JSON or YAML

:author: Doug Skrypa
"""

import json
from collections.abc import Mapping, KeysView, ValuesView
from dataclasses import fields, is_dataclass
from enum import Enum, IntEnum
from pathlib import Path

import yaml

__all__ = ['IndentedYamlDumper', 'PermissiveJSONEncoder', 'to_plain', 'yaml_dump', 'json_dump']


def _enum_value(obj: Enum):
    # IntEnum by name, str enums by value
    return obj.name if isinstance(obj, IntEnum) else obj.value


class PermissiveJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, (set, KeysView)):
            return sorted(o)
        elif isinstance(o, ValuesView):
            return list(o)
        elif isinstance(o, Mapping):
            return dict(o)
        elif isinstance(o, (bytes, bytearray, memoryview)):
            return bytes(o).hex()
        elif isinstance(o, Enum):
            return _enum_value(o)
        elif isinstance(o, (type, Path)):
            return str(o)
        elif hasattr(o, '__serializable__'):
            return o.__serializable__()
        elif is_dataclass(o):
            return {f.name: getattr(o, f.name) for f in fields(o) if f.repr}
        return super().default(o)

    def encode(self, o):
        # IntEnum members are ints, so json would otherwise emit their numeric value without calling default()
        return super().encode(to_plain(o))

    def iterencode(self, o, _one_shot=False):
        return super().iterencode(to_plain(o), _one_shot)


class IndentedYamlDumper(yaml.SafeDumper):
    """This indents lists that are nested in dicts in the same way as the Perl yaml library"""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def to_plain(obj):
    """
    Recursively convert the given object to plain dicts, lists, strings, and numbers.  Records are converted via their
    ``__serializable__`` method, other dataclasses via their fields, enums to their name or value, and bytes to hex.
    """
    if isinstance(obj, Enum):
        return _enum_value(obj)
    elif hasattr(obj, '__serializable__'):
        return to_plain(obj.__serializable__())
    elif is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_plain(getattr(obj, f.name)) for f in fields(obj) if f.repr}
    elif isinstance(obj, Mapping):
        return {to_plain(k): to_plain(v) for k, v in obj.items()}
    elif isinstance(obj, (set, frozenset, KeysView)):
        return [to_plain(v) for v in sorted(obj)]
    elif isinstance(obj, (list, tuple, ValuesView)):
        return [to_plain(v) for v in obj]
    elif isinstance(obj, (bytes, bytearray, memoryview)):
        return bytes(obj).hex()
    elif isinstance(obj, (type, Path)):
        return str(obj)
    return obj


def json_dump(data, indent: int = 4, **kwargs) -> str:
    kwargs.setdefault('ensure_ascii', False)
    return json.dumps(data, cls=PermissiveJSONEncoder, indent=indent, **kwargs)


def yaml_dump(data, force_single_yaml=False, indent_nested_lists=False, default_flow_style=None, **kwargs):
    """
    Serialize the given data as YAML

    :param data: Data structure to be serialized
    :param bool force_single_yaml: Force a single YAML document to be created instead of multiple ones when the
      top-level data structure is not a dict
    :param bool indent_nested_lists: Indent lists that are nested in dicts in the same way as the Perl yaml library
    :return str: Yaml-formatted data
    """
    content = to_plain(data)
    kwargs.setdefault('explicit_start', True)
    kwargs.setdefault('width', float('inf'))
    kwargs.setdefault('allow_unicode', True)
    kwargs.setdefault('sort_keys', False)
    kwargs['Dumper'] = IndentedYamlDumper if indent_nested_lists else yaml.SafeDumper

    if isinstance(content, (dict, str)) or force_single_yaml:
        kwargs.setdefault('default_flow_style', False if default_flow_style is None else default_flow_style)
        formatted = yaml.dump(content, **kwargs)
    else:
        kwargs.setdefault('default_flow_style', True if default_flow_style is None else default_flow_style)
        formatted = yaml.dump_all(content, **kwargs)
    if formatted.endswith('...\n'):
        formatted = formatted[:-4]
    if formatted.endswith('\n'):
        formatted = formatted[:-1]
    return formatted
