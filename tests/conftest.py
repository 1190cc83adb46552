"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides small sample reports shared across test modules.
"""

import os
import sys
from pathlib import Path

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

for module_name in list(sys.modules.keys()):
    if module_name.startswith("coverlay"):
        del sys.modules[module_name]


LCOV_REPORT = """\
TN:unit
SF:src/app.py
FN:1,main
FNDA:2,main
DA:1,2
DA:2,0
DA:3,5
BRDA:3,0,0,1
BRDA:3,0,1,0
LF:3
LH:2
end_of_record
"""

COBERTURA_REPORT = """\
<?xml version="1.0" ?>
<coverage version="7.4" line-rate="0.5" branch-rate="0.5" timestamp="1" lines-valid="4" lines-covered="2">
    <sources>
        <source>/project</source>
    </sources>
    <packages>
        <package name="src" line-rate="0.5" branch-rate="0.5">
            <classes>
                <class name="app.py" filename="src/app.py" line-rate="0.5" branch-rate="0.5">
                    <methods/>
                    <lines>
                        <line number="1" hits="1"/>
                        <line number="2" hits="0"/>
                        <line number="3" hits="4" branch="true" condition-coverage="50% (1/2)"/>
                        <line number="4" hits="0"/>
                    </lines>
                </class>
            </classes>
        </package>
    </packages>
</coverage>
"""

CLOVER_REPORT = """\
<?xml version="1.0" encoding="UTF-8"?>
<coverage generated="1700000000" clover="4.4.1">
  <project timestamp="1700000000" name="All files">
    <metrics statements="4" coveredstatements="3"/>
    <file name="util.js" path="/project/src/util.js">
      <line num="1" count="3" type="method" name="run"/>
      <line num="2" count="3" type="stmt"/>
      <line num="3" count="0" type="stmt"/>
      <line num="4" truecount="2" falsecount="0" type="cond"/>
    </file>
  </project>
</coverage>
"""

JACOCO_REPORT = """\
<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<!DOCTYPE report PUBLIC "-//JACOCO//DTD Report 1.1//EN" "report.dtd">
<report name="demo">
  <package name="com/acme">
    <class name="com/acme/Util" sourcefilename="Util.java">
      <method name="run" desc="()V" line="5">
        <counter type="METHOD" missed="0" covered="1"/>
      </method>
    </class>
    <sourcefile name="Util.java">
      <line nr="5" mi="0" ci="3" mb="0" cb="0"/>
      <line nr="6" mi="0" ci="2" mb="1" cb="1"/>
      <line nr="7" mi="4" ci="0" mb="0" cb="0"/>
    </sourcefile>
  </package>
</report>
"""


@pytest.fixture
def lcov_report() -> str:
    return LCOV_REPORT


@pytest.fixture
def cobertura_report() -> str:
    return COBERTURA_REPORT


@pytest.fixture
def clover_report() -> str:
    return CLOVER_REPORT


@pytest.fixture
def jacoco_report() -> str:
    return JACOCO_REPORT


@pytest.fixture(autouse=True)
def _isolate_global_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep the user's ~/.config/coverlay and COVERLAY__ env vars out of tests."""
    missing = tmp_path_factory.mktemp("global-config") / "config.yaml"
    monkeypatch.setattr("coverlay.config.loader.GLOBAL_CONFIG_PATH", missing)
    for name in list(os.environ):
        if name.startswith("COVERLAY__"):
            monkeypatch.delenv(name)
