"""Tests for the build script scanner."""

from gradlefix.scanner import (
    enclosing_blocks,
    find_blocks,
    find_calls,
    find_dependency_calls,
    in_block,
    mask_literals,
    split_arguments,
)


class TestMasking:
    """Test blanking of comments and literals."""

    def test_offsets_preserved(self):
        text = 'a("x(y)") // c)\n/* ) */b'
        masked = mask_literals(text)
        assert len(masked) == len(text)
        assert masked.index("\n") == text.index("\n")
        assert "(y)" not in masked
        assert ")" not in masked[masked.index("\n") :]

    def test_quotes_kept(self):
        assert mask_literals('"abc"') == '"   "'


class TestFindCalls:
    """Test statement-level call discovery."""

    def test_finds_statement_calls(self):
        text = 'implementation("a:b:1.0")\napi("c", "d")\n'
        calls = find_calls(text)
        assert [call.callee for call in calls] == ["implementation", "api"]
        assert text[calls[0].start : calls[0].end] == 'implementation("a:b:1.0")'
        assert text[calls[1].arguments_start : calls[1].arguments_end] == '("c", "d")'

    def test_named_arguments(self):
        call = find_calls('implementation(group = "a", name = "b")')[0]
        assert [argument.name for argument in call.arguments] == ["group", "name"]
        assert call.arguments[0].expression.value == "a"

    def test_commas_in_literals_and_calls(self):
        call = find_calls('implementation("a,b", f(1, 2))')[0]
        assert len(call.arguments) == 2
        assert call.arguments[1].expression.text == "f(1, 2)"

    def test_trailing_lambda(self):
        text = 'implementation("a:b:1.0") {\n    exclude(group = "x")\n}\nnext()'
        calls = find_calls(text)
        assert [call.callee for call in calls] == ["implementation", "next"]
        assert calls[0].has_trailing_lambda
        assert text[calls[0].end - 1] == "}"

    def test_ignores_commented_calls(self):
        assert find_calls('// implementation("a:b")\n/* api("c:d") */') == []

    def test_ignores_unclosed_calls(self):
        assert find_calls('implementation("a:b"') == []


class TestBlocks:
    """Test block discovery."""

    def test_find_blocks(self, sample_build_script):
        blocks = find_blocks(sample_build_script, "dependencies")
        assert len(blocks) == 1
        block = blocks[0]
        assert sample_build_script[block.open] == "{"
        assert sample_build_script[block.close] == "}"

    def test_enclosing_blocks(self):
        text = "buildscript {\n  dependencies {\n    classpath(\"a:b:1\")\n  }\n}\n"
        offset = text.index("classpath")
        assert enclosing_blocks(text, offset) == ["buildscript", "dependencies"]
        assert in_block(text, offset, "dependencies")
        assert not in_block(text, 0, "dependencies")


class TestDependencyCalls:
    """Test calls inside dependencies blocks."""

    def test_only_inside_dependencies(self, sample_build_script):
        callees = [call.callee for call in find_dependency_calls(sample_build_script)]
        assert callees == ["implementation", "implementation", "compile", "implementation", "testImplementation"]

    def test_skips_non_declaration_calls(self):
        text = 'dependencies {\n    constraints {\n    }\n    add("implementation", "a:b:1")\n    api("c:d")\n}\n'
        assert [call.callee for call in find_dependency_calls(text)] == ["api"]

    def test_split_arguments_trims(self):
        masked = mask_literals('f( "a" ,  b )')
        spans = split_arguments(masked, 2, len(masked) - 1)
        assert [masked[start:end] for start, end in spans] == ['" "', "b"]

    def test_declarations_inside_control_flow(self):
        text = 'dependencies {\n    if (useX) {\n        implementation("a", "b", "1.0")\n    }\n}\n'
        calls = find_dependency_calls(text)
        assert [call.callee for call in calls] == ["implementation"]
        assert calls[0].start == text.index("implementation")

    def test_declarations_inside_scope_lambda(self):
        text = 'dependencies {\n    with(libs) {\n        api("c:d")\n    }\n}\n'
        assert [call.callee for call in find_dependency_calls(text)] == ["with", "api"]

    def test_declaration_lambda_is_not_scanned(self):
        text = 'dependencies {\n    implementation("a:b:1") {\n        exclude(group = "x", module = "y")\n    }\n}\n'
        assert [call.callee for call in find_dependency_calls(text)] == ["implementation"]


class TestStatementCalls:
    """Test that control flow headers are not taken for calls."""

    def test_keywords_are_not_callees(self):
        text = 'if (useX) {\n    api("c:d")\n}\nfor (x in xs) {\n    api(x)\n}\n'
        assert [call.callee for call in find_calls(text)] == ["api", "api"]
