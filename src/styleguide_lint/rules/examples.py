"""Rules for Bad/Good code samples and the MARK comment convention."""

import re

from styleguide_lint.parser.example_extractors import BAD, GOOD, ExampleExtractor
from styleguide_lint.rules.base import Rule, Severity, register_rule

MARK_FORMAT = re.compile(r"^// MARK: - \S")


def _extractor(config) -> ExampleExtractor:
    return ExampleExtractor(bad_labels=config.bad_labels, good_labels=config.good_labels)


@register_rule
class UnpairedExample(Rule):
    """A Bad sample has a Good counterpart in its section, and vice versa."""

    rule_id = "EX001"
    name = "unpaired-example"
    severity = Severity.WARNING
    description = "Bad/Good example without its counterpart in the same section"

    def check(self, document, config):
        examples = _extractor(config).extract_pairs(document)
        for block in examples.unpaired:
            missing = GOOD if block.label == BAD else BAD
            yield self.violation(
                document,
                f"'{block.label_text}' example has no matching {missing} example in this section",
                block.line,
                section=block.section,
            )


@register_rule
class ExampleLanguageMismatch(Rule):
    rule_id = "EX002"
    name = "example-language-mismatch"
    severity = Severity.WARNING
    description = "Bad and Good samples of a pair use different fence languages"

    def check(self, document, config):
        for pair in _extractor(config).extract_pairs(document).pairs:
            if pair.languages_match:
                continue
            bad_lang = pair.bad.language or "(none)"
            good_lang = pair.good.language or "(none)"
            yield self.violation(
                document,
                f"Example pair mixes languages: bad sample is {bad_lang}, good sample is {good_lang}",
                max(pair.bad.line, pair.good.line),
                section=pair.section,
            )


@register_rule
class DeprecatedSyntax(Rule):
    """Code samples do not use syntax the language has since removed.

    Samples labelled bad are skipped: showing the outdated form is their
    purpose. Unlabelled fences with no language count as samples in
    ``code_language``.
    """

    rule_id = "EX003"
    name = "deprecated-syntax"
    severity = Severity.WARNING
    description = "Code sample matches an entry of the deprecated-syntax table"

    def check(self, document, config):
        _extractor(config).label_blocks(document)
        default_language = config.code_language.lower()

        for block in document.code_blocks:
            if block.label == BAD:
                continue
            language = block.language or default_language
            patterns = [
                p for p in config.deprecated_patterns
                if language in (p.languages or [default_language])
            ]
            if not patterns:
                continue
            for number, text in block.code_lines():
                for pattern in patterns:
                    match = pattern.regex.search(text)
                    if match:
                        yield self.violation(
                            document,
                            f"{pattern.message}: {text.strip()}",
                            number,
                            column=match.start() + 1,
                            section=block.section,
                        )


@register_rule
class MarkCommentFormat(Rule):
    rule_id = "MARK001"
    name = "mark-comment-format"
    severity = Severity.INFO
    description = "MARK comment in a code sample is not written as '// MARK: - Title'"

    def check(self, document, config):
        extractor = _extractor(config)
        extractor.label_blocks(document)
        for mark in extractor.extract_mark_comments(document):
            if mark.block.label == BAD or MARK_FORMAT.match(mark.text):
                continue
            title = mark.text.split(":", 1)[1].strip().lstrip("-").strip()
            suggestion = f"// MARK: - {title}" if title else "// MARK: - Title"
            yield self.violation(
                document,
                f"Write '{mark.text}' as '{suggestion}'",
                mark.line,
                section=mark.block.section,
            )
