# tests/unit/test_analysis_stages.py
"""
Tests for the analysis stages: Java structure and diff report parsing.
"""

import pytest

from mcdelta.analysis.changes import class_name_for, parse_diff_report
from mcdelta.analysis.structure import analyze_code, analyze_java_source

MOD_CLASS = """\
package com.example.mymod;

import net.minecraft.world.level.Level;
import net.minecraft.world.entity.*;
import static net.minecraft.util.Mth.clamp;
import java.util.List;

// class Commented {}
/* interface AlsoCommented {} */
public class MyBlock extends BaseBlock implements Tickable, Comparable<MyBlock> {
    private final String name = "class Fake {";

    public MyBlock(String name) {
        this.name = name;
    }

    @Override
    public void tick(Level level, int times) {
        if (level != null) {
            level.update();
        }
    }

    protected static <T> List<T> wrap(Map<String, Integer> values, final T item) throws Exception {
        return List.of(item);
    }

    int count() { return 0; }
}
"""

MOD_INTERFACE = """\
package com.example.mymod.api;

public interface Tickable extends Runnable, AutoCloseable {
    void tick(Level level, int times);
}
"""

REPORT = """\
Comparison Report: 1.20.1 -> 1.20.2
Generated at: 2026-01-01T00:00:00+00:00
Mode: full

=== Statistics ===
Added files: 1

=== Added Files ===
+ net/minecraft/world/entity/Zombie.java

=== Modified Files ===
* net/minecraft/world/level/Level.java
* assets/lang/en_us.json

=== Deleted Files ===
- net/minecraft/util/Mth.java
- net/minecraft/world/level/Level$Inner.class

=== Modified Files Content ===

File: net/minecraft/world/level/Level.java
----------------------------------------
- this line is diff output, not a deleted file
+ neither is this one
"""


class TestJavaStructure:
    """Tests for analyze_java_source / analyze_code."""

    def test_class_declaration(self):
        classes = analyze_java_source(MOD_CLASS)

        assert [c.qualified_name for c in classes] == ["com.example.mymod.MyBlock"]
        block = classes[0]
        assert block.kind == "class"
        assert block.superclass == "BaseBlock"
        assert block.interfaces == ["Tickable", "Comparable"]

    def test_imports(self):
        block = analyze_java_source(MOD_CLASS)[0]

        assert block.imports == {
            "net.minecraft.world.level.Level",
            "net.minecraft.world.entity.*",
            "net.minecraft.util.Mth.clamp",
            "java.util.List",
        }

    def test_methods(self):
        block = analyze_java_source(MOD_CLASS)[0]
        by_name = {m.name: m for m in block.methods}

        assert set(by_name) == {"tick", "wrap", "count"}
        assert by_name["tick"].visibility == "public"
        assert by_name["tick"].return_type == "void"
        assert by_name["tick"].parameters == ("Level", "int")
        assert by_name["wrap"].return_type == "List<T>"
        assert by_name["wrap"].parameters == ("Map<String, Integer>", "T")
        assert by_name["count"].visibility == "package"

    def test_interface_extends_are_interfaces(self):
        api = analyze_java_source(MOD_INTERFACE)[0]

        assert api.kind == "interface"
        assert api.superclass is None
        assert api.interfaces == ["Runnable", "AutoCloseable"]
        assert [m.name for m in api.methods] == ["tick"]

    def test_no_declarations(self):
        assert analyze_java_source("// nothing here\n") == []

    def test_analyze_directory(self, make_tree):
        root = make_tree(
            "mod",
            {
                "com/example/mymod/MyBlock.java": MOD_CLASS,
                "com/example/mymod/api/Tickable.java": MOD_INTERFACE,
                "assets/readme.txt": "not java",
            },
        )

        structure = analyze_code(root)

        assert structure.files_analyzed == 2
        assert set(structure.classes) == {
            "com.example.mymod.MyBlock",
            "com.example.mymod.api.Tickable",
        }
        assert structure.packages == {"com.example.mymod", "com.example.mymod.api"}
        assert structure.method_count == 4

    def test_analyze_single_file(self, make_tree):
        root = make_tree("mod", {"MyBlock.java": MOD_CLASS})

        structure = analyze_code(root / "MyBlock.java")

        assert list(structure.classes) == ["com.example.mymod.MyBlock"]

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            analyze_code(tmp_path / "missing")


class TestDiffReportParsing:
    """Tests for parse_diff_report."""

    def test_class_name_for(self):
        assert class_name_for("net/minecraft/world/level/Level.java") == "net.minecraft.world.level.Level"
        assert class_name_for("net/minecraft/A$B.class") == "net.minecraft.A"
        assert class_name_for("assets/lang/en_us.json") is None

    def test_listing_sections(self, tmp_path):
        path = tmp_path / "diff_report_1.20.1_to_1.20.2.txt"
        path.write_text(REPORT, encoding="utf-8")

        changes = parse_diff_report(path)

        assert changes.added == ["net/minecraft/world/entity/Zombie.java"]
        assert changes.modified == [
            "net/minecraft/world/level/Level.java",
            "assets/lang/en_us.json",
        ]
        assert changes.removed == [
            "net/minecraft/util/Mth.java",
            "net/minecraft/world/level/Level$Inner.class",
        ]
        assert changes.total == 5

    def test_class_sets(self, tmp_path):
        """Inner class removal under a changed outer class is a change."""
        path = tmp_path / "report.txt"
        path.write_text(REPORT, encoding="utf-8")

        changes = parse_diff_report(path)

        assert changes.changed_classes == {
            "net.minecraft.world.entity.Zombie",
            "net.minecraft.world.level.Level",
        }
        assert changes.removed_classes == {"net.minecraft.util.Mth"}

    def test_not_a_report_raises(self, tmp_path):
        path = tmp_path / "random.txt"
        path.write_text("just some text\n- not a listing\n")

        with pytest.raises(ValueError):
            parse_diff_report(path)

    def test_missing_report_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_diff_report(tmp_path / "missing.txt")
