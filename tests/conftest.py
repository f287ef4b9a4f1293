from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

SAMPLE_MODULE = "sample_shapes"


@pytest.fixture
def sample_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    project_dir = tmp_path / "project"
    project_dir.mkdir(parents=True)

    (project_dir / "shapeschema.yaml").write_text(
        """
version: v1

root: sample_shapes:user

definitions:
  Address: sample_shapes:address

dialect: https://json-schema.org/draft/2020-12/schema
check_schema: true

output:
  path: build/user.schema.json
  indent: 2
""".strip()
        + "\n",
        encoding="utf-8",
    )

    (project_dir / f"{SAMPLE_MODULE}.py").write_text(
        """
from shapeschema import shapes as s

address = s.object({
    "street": s.string(),
    "city": s.string().max(64),
})

user = s.object({
    "name": s.string().min(1),
    "age": s.integer().gte(0).optional(),
    "address": address,
    "friends": s.array(s.lazy(lambda: user)),
}).describe("A user")

unused = s.number()
broken = s.symbol()
unserializable = s.const({1, 2})
not_a_shape = 42
""".strip()
        + "\n",
        encoding="utf-8",
    )

    monkeypatch.delitem(sys.modules, SAMPLE_MODULE, raising=False)
    return project_dir
