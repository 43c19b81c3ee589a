"""Tests for Bad/Good example extraction."""

import pytest

from styleguide_lint.parser.example_extractors import BAD, GOOD, ExampleExtractor


def _guide(*blocks):
    return "# Guide\n\n## Section\n\n" + "\n\n".join(blocks) + "\n"


# =============================================================================
# Labels
# =============================================================================

class TestLabels:
    """Tests for label detection."""

    @pytest.fixture
    def extractor(self):
        return ExampleExtractor()

    @pytest.mark.parametrize("label_line,kind,text", [
        ("**Preferred:**", GOOD, "Preferred"),
        ("**Not Preferred:**", BAD, "Not Preferred"),
        ("*Preferred*:", GOOD, "Preferred"),
        ("Bad: this allocates twice", BAD, "Bad"),
        ("**Good**", GOOD, "Good"),
        ("__Avoid:__", BAD, "Avoid"),
    ])
    def test_label_before_fence(self, extractor, parser, label_line, kind, text):
        """Labels written on the line above the fence."""
        doc = parser.parse_text(_guide(f"{label_line}\n```swift\nlet a = 1\n```"))

        blocks = extractor.label_blocks(doc)

        assert len(blocks) == 1
        assert blocks[0].label == kind
        assert blocks[0].label_text == text

    def test_blank_line_between_label_and_fence(self, extractor, parser):
        doc = parser.parse_text(_guide("**Preferred:**\n\n```swift\nlet a = 1\n```"))
        assert extractor.label_blocks(doc)[0].label == GOOD

    @pytest.mark.parametrize("first_line,kind", [
        ("// bad", BAD),
        ("// Good:", GOOD),
        ("/* Not Preferred */", BAD),
    ])
    def test_label_comment_inside_block(self, extractor, parser, first_line, kind):
        """Labels written as the first line of the sample."""
        doc = parser.parse_text(_guide(f"```swift\n{first_line}\nlet a = 1\n```"))
        assert extractor.label_blocks(doc)[0].label == kind

    def test_hash_comment_label_in_python(self, extractor, parser):
        doc = parser.parse_text(_guide("```python\n# good\nx = 1\n```"))
        assert extractor.label_blocks(doc)[0].label == GOOD

    def test_heading_above_fence_is_not_label(self, extractor, parser):
        """A heading named 'Good' does not label the block under it."""
        doc = parser.parse_text("# Guide\n\n### Good\n```swift\nlet a = 1\n```\n")
        assert extractor.label_blocks(doc) == []

    def test_prose_starting_with_label_word_is_not_label(self, extractor, parser):
        doc = parser.parse_text(_guide("Do not do this:\n```swift\nlet a = 1\n```"))
        assert extractor.label_blocks(doc) == []

    def test_custom_labels(self, parser):
        extractor = ExampleExtractor(bad_labels=["Before"], good_labels=["After"])
        doc = parser.parse_text(_guide(
            "**Before:**\n```swift\nvar a = 1\n```",
            "**After:**\n```swift\nlet a = 1\n```",
            "**Preferred:**\n```swift\nlet b = 2\n```",
        ))

        blocks = extractor.label_blocks(doc)

        assert [b.label for b in blocks] == [BAD, GOOD]


# =============================================================================
# Pairing
# =============================================================================

class TestPairing:
    """Tests for extract_pairs."""

    @pytest.fixture
    def extractor(self):
        return ExampleExtractor()

    def test_sample_guide_pairs(self, extractor, sample_guide, find_line):
        """Preferred/Not Preferred blocks pair up; the extra Bad block does not."""
        result = extractor.extract_pairs(sample_guide)

        assert [p.section for p in result.pairs] == ["enumerations", "control-flow"]
        assert [b.label_text for b in result.unpaired] == ["Bad"]
        assert result.unpaired[0].line == find_line(sample_guide, "**Bad:**") + 1

    def test_bad_then_good(self, extractor, parser):
        doc = parser.parse_text(_guide(
            "Bad:\n```swift\nvar a = 1\n```",
            "Good:\n```swift\nlet a = 1\n```",
        ))

        pair = extractor.extract_pairs(doc).pairs[0]

        assert "var a" in pair.bad.code
        assert "let a" in pair.good.code
        assert pair.languages_match

    def test_pairs_in_order(self, extractor, parser):
        """Two bad samples followed by two good ones pair first with first."""
        doc = parser.parse_text(_guide(
            "Bad:\n```swift\nbad1\n```",
            "Bad:\n```swift\nbad2\n```",
            "Good:\n```swift\ngood1\n```",
            "Good:\n```swift\ngood2\n```",
        ))

        pairs = extractor.extract_pairs(doc).pairs

        assert [(p.bad.code, p.good.code) for p in pairs] == [("bad1", "good1"), ("bad2", "good2")]

    def test_pairs_do_not_cross_sections(self, extractor, parser):
        text = (
            "# Guide\n\n## One\n\nBad:\n```swift\nvar a = 1\n```\n\n"
            "## Two\n\nGood:\n```swift\nlet a = 1\n```\n"
        )
        result = extractor.extract_pairs(parser.parse_text(text))

        assert result.pairs == []
        assert [b.section for b in result.unpaired] == ["one", "two"]

    def test_language_mismatch_detected(self, extractor, parser):
        doc = parser.parse_text(_guide(
            "Bad:\n```objc\n[a b];\n```",
            "Good:\n```swift\na.b()\n```",
        ))
        assert extractor.extract_pairs(doc).pairs[0].languages_match is False

    def test_by_section(self, extractor, sample_guide):
        grouped = extractor.extract_pairs(sample_guide).by_section()
        assert sorted(grouped) == ["control-flow", "enumerations"]
        assert len(grouped["enumerations"]) == 1


# =============================================================================
# MARK comments
# =============================================================================

class TestMarkComments:
    """Tests for extract_mark_comments."""

    def test_marks_found_with_document_lines(self, sample_guide, find_line):
        marks = ExampleExtractor().extract_mark_comments(sample_guide)

        assert [m.text for m in marks] == ["// MARK: Private", "// MARK: - Public"]
        assert marks[0].line == find_line(sample_guide, "// MARK: Private")
        assert marks[0].block.section == "comments"
