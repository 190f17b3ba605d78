"""End-to-end pipeline tests with a fake tag extractor."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import pytest

from sketchpp.errors import ExtractionError, InvalidInputError
from sketchpp.orchestrator import Orchestrator, PipelineStage
from sketchpp.tags import CtagsExtractor, ExtractorOutput, TagExtractor
from tests._fixtures.fake_ctags import FakeCtags
from tests._fixtures.sketch_builder import SketchBuilder


class FailingExtractor(TagExtractor):
    def extract(self, source_path: Path) -> List[str]:
        raise ExtractionError("ctags exited with status 2", returncode=2, diagnostics="bad input")


def _blink(builder: SketchBuilder) -> None:
    builder.write(
        {
            "Blink.ino": """
                void setup(){ pinMode(13, OUTPUT); }
                void loop(){ add(1); }
            """,
            "Helper.ino": """
                int add(int a, int b=0){ return a+b; }
            """,
        }
    )


def test_blink_project_gets_prototypes_in_line_order(
    sketch_builder: SketchBuilder, fake_ctags: FakeCtags
) -> None:
    _blink(sketch_builder)

    result = Orchestrator(extractor=fake_ctags).run(sketch_builder.path(), sketch_builder.output)

    assert result.output_path == sketch_builder.output.resolve() / "Blink.ino"
    assert result.prototypes == ["void setup();", "void loop();", "int add(int a, int b);"]
    assert result.stage is PipelineStage.DONE
    assert result.output_path.read_text(encoding="utf-8") == (
        '#line 1 "Blink.ino"\n'
        "void setup();\n"
        "void loop();\n"
        "int add(int a, int b);\n"
        "#line 1\n"
        "void setup(){ pinMode(13, OUTPUT); }\n"
        "void loop(){ add(1); }\n"
        '#line 1 "Helper.ino"\n'
        "int add(int a, int b=0){ return a+b; }\n"
    )


def test_main_sketch_is_unified_first(tmp_path: Path, fake_ctags: FakeCtags) -> None:
    builder = SketchBuilder(tmp_path, name="Zeta")
    builder.write({"Alpha.ino": "void alpha(){}\n", "Zeta.ino": "void setup(){}\n"})

    Orchestrator(extractor=fake_ctags).run(builder.path(), builder.output)

    seen = fake_ctags.seen[0]
    assert seen.index('"Zeta.ino"') < seen.index('"Alpha.ino"')


def test_prototypes_follow_leading_directives_and_comments(
    sketch_builder: SketchBuilder, fake_ctags: FakeCtags
) -> None:
    sketch_builder.write(
        {
            "Blink.ino": """
                #include <Servo.h>
                /* Sweep a servo */
                // across its range

                Servo servo;
                void setup(){ servo.attach(9); }
            """,
        }
    )

    result = Orchestrator(extractor=fake_ctags).run(sketch_builder.path(), sketch_builder.output)
    text = result.output_path.read_text(encoding="utf-8")

    assert "// across its range\n\nvoid setup();\n#line 5\nServo servo;\n" in text


def test_template_function_is_copied_through(
    sketch_builder: SketchBuilder, fake_ctags: FakeCtags
) -> None:
    sketch_builder.write(
        {"Blink.ino": "template<typename T> T max(T a, T b){ return a > b ? a : b; }\n"}
    )

    result = Orchestrator(extractor=fake_ctags).run(sketch_builder.path(), sketch_builder.output)

    assert result.prototypes == ["template<typename T> T max(T a, T b)"]


def test_existing_prototypes_suppress_new_ones(
    sketch_builder: SketchBuilder, fake_ctags: FakeCtags
) -> None:
    sketch_builder.write(
        {
            "Blink.ino": """
                void helper();
                void setup(){ helper(); }
                void helper(){}
            """,
        }
    )

    result = Orchestrator(extractor=fake_ctags).run(sketch_builder.path(), sketch_builder.output)

    assert result.prototypes == ["void setup();"]


def test_second_pass_does_not_duplicate_prototypes(
    sketch_builder: SketchBuilder, tmp_path: Path
) -> None:
    _blink(sketch_builder)
    first = Orchestrator(extractor=FakeCtags()).run(sketch_builder.path(), sketch_builder.output)

    rerun = SketchBuilder(tmp_path / "rerun")
    rerun.write({"Blink.ino": first.output_path.read_text(encoding="utf-8")})
    second = Orchestrator(extractor=FakeCtags()).run(rerun.path(), rerun.output)
    text = second.output_path.read_text(encoding="utf-8")

    assert second.prototypes == []
    for prototype in first.prototypes:
        assert text.count(prototype) == 1


def test_plain_variant_skips_markers_and_correction(
    sketch_builder: SketchBuilder, fake_ctags: FakeCtags
) -> None:
    _blink(sketch_builder)

    result = Orchestrator(extractor=fake_ctags, variant="plain").run(
        sketch_builder.path(), sketch_builder.output
    )

    assert result.output_path.read_text(encoding="utf-8") == (
        "void setup();\n"
        "void loop();\n"
        "int add(int a, int b);\n"
        "void setup(){ pinMode(13, OUTPUT); }\n"
        "void loop(){ add(1); }\n"
        "int add(int a, int b=0){ return a+b; }\n"
    )


def test_run_clears_stale_output_and_copies_companions(
    sketch_builder: SketchBuilder, fake_ctags: FakeCtags
) -> None:
    _blink(sketch_builder)
    sketch_builder.write({"motor.cpp": "int motor(){ return 0; }\n", "motor.h": "int motor();\n"})
    (sketch_builder.output / "stale.cpp").write_text("old\n", encoding="utf-8")
    (sketch_builder.output / "firmware.hex").write_text(":00\n", encoding="utf-8")

    result = Orchestrator(extractor=fake_ctags).run(sketch_builder.path(), sketch_builder.output)

    names = sorted(path.name for path in sketch_builder.output.iterdir())
    assert names == ["Blink.ino", "firmware.hex", "motor.cpp", "motor.h"]
    assert [path.name for path in result.copied] == ["motor.cpp", "motor.h"]


def test_extraction_failure_writes_no_primary_file(sketch_builder: SketchBuilder) -> None:
    _blink(sketch_builder)
    (sketch_builder.output / "Blink.ino").write_text("stale\n", encoding="utf-8")
    orchestrator = Orchestrator(extractor=FailingExtractor())

    with pytest.raises(ExtractionError, match="bad input"):
        orchestrator.run(sketch_builder.path(), sketch_builder.output)

    assert orchestrator.stage is PipelineStage.FAILED
    assert not (sketch_builder.output / "Blink.ino").exists()


def test_ctags_is_built_from_config(
    sketch_builder: SketchBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    _blink(sketch_builder)
    sketch_builder.write({".sketchpp.yml": "extractor:\n  executable: /opt/ctags\n"})
    monkeypatch.delenv("SKETCHPP_CTAGS", raising=False)
    calls: List[List[str]] = []

    def runner(args: Sequence[str]) -> ExtractorOutput:
        calls.append(list(args))
        return ExtractorOutput(returncode=0, stdout="", stderr="")

    monkeypatch.setattr(CtagsExtractor, "_default_runner", staticmethod(runner))

    result = Orchestrator(variant="plain").run(sketch_builder.path(), sketch_builder.output)

    assert calls[0][0] == "/opt/ctags"
    assert "--c++-kinds=svpf" in calls[0]
    assert result.prototypes == []


def test_invalid_project_touches_nothing(sketch_builder: SketchBuilder, fake_ctags: FakeCtags) -> None:
    sketch_builder.write({"Other.ino": "void setup(){}\n"})
    (sketch_builder.output / "keep.cpp").write_text("old\n", encoding="utf-8")

    with pytest.raises(InvalidInputError):
        Orchestrator(extractor=fake_ctags).run(sketch_builder.path(), sketch_builder.output)

    assert (sketch_builder.output / "keep.cpp").exists()
    assert fake_ctags.seen == []
