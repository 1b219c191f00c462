import re
from pathlib import Path

from coursehub import schemas

SCHEMA_SQL = Path(__file__).resolve().parents[1] / "sql" / "catalog_schema.sql"


def test_course_level_default_uses_stored_vocabulary():
    match = re.search(r"level text not null default '(\w+)'", SCHEMA_SQL.read_text())

    assert match is not None
    assert match.group(1) == schemas.CourseLevel.beginner.value
