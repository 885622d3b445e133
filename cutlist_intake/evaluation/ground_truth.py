"""Ground-truth and sample file loading.

Parts file (YAML or JSON), either a bare list or under a "parts" key:
```yaml
parts:
  - part_id: P001
    label: Side panel
    qty: 2
    size: {L: 720, W: 560}
    thickness_mm: 18
    material_id: MAT-WHITE-18
    ops:
      edging:
        edges:
          L1: {apply: true}
```

Samples file: a list of AccuracySample dicts (camelCase or snake_case),
either bare or under a "samples" key.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..models.accuracy import AccuracySample
from ..models.part import CutPart


def load_document(path: Union[str, Path]) -> Any:
    """
    Load a YAML (.yaml/.yml) or JSON file.

    Raises:
        ValueError: if the file is not valid YAML/JSON
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"{path}: invalid YAML: {e}") from e
        return json.load(f)


def _records(document: Any, key: str, path: Union[str, Path]) -> List[Dict[str, Any]]:
    if isinstance(document, dict):
        document = document.get(key)
    if not isinstance(document, list):
        raise ValueError(f"{path}: expected a list of {key} or a mapping with a '{key}' key")
    for i, item in enumerate(document):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: {key}[{i}] is not a mapping")
    return document


def load_parts_file(path: Union[str, Path]) -> List[CutPart]:
    """
    Load canonical parts from a ground-truth file.

    Raises:
        ValueError: if the document or any part is malformed
    """
    return [CutPart.from_dict(d) for d in _records(load_document(path), "parts", path)]


def load_samples_file(path: Union[str, Path]) -> List[AccuracySample]:
    """
    Load accuracy samples from a file.

    Raises:
        ValueError: if the document or any sample is malformed
    """
    return [AccuracySample.from_dict(d) for d in _records(load_document(path), "samples", path)]
