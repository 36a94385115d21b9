# -*- coding: utf-8 -*-
"""Tests for term extraction."""
from __future__ import annotations

import unittest

from batch_i18n.engine.extract import SCRIPT_CONTEXT, TEMPLATE_CONTEXT, TermKind, extract


def _contents(terms):
    return [t.content for t in terms]


class TestQuotedTerms(unittest.TestCase):
    """Test the quote scanners."""

    def test_plain_attribute_value(self):
        buf = '<el-input placeholder="请输入">'
        terms = extract(buf, TEMPLATE_CONTEXT)
        self.assertEqual(len(terms), 1)
        term = terms[0]
        self.assertEqual(term.kind, TermKind.DOUBLE_QUOTE)
        self.assertEqual(term.span, '"请输入"')
        self.assertEqual(term.content, "请输入")
        self.assertEqual(term.offset, buf.index('"'))

    def test_content_is_trimmed(self):
        terms = extract("const a = '  保存  '")
        self.assertEqual(terms[0].content, "保存")
        self.assertEqual(terms[0].span, "'  保存  '")

    def test_nested_quotes_are_captured_once(self):
        """Test "'保存'" is left to the single-quote scanner."""
        terms = extract(':label="\'保存\'"', TEMPLATE_CONTEXT)
        self.assertEqual([t.kind for t in terms], [TermKind.SINGLE_QUOTE])
        self.assertEqual(terms[0].span, "'保存'")

    def test_ascii_literals_are_not_terms(self):
        self.assertEqual(extract("const a = 'save'; const b = \"ok\""), [])

    def test_expression_values_are_skipped(self):
        terms = extract('<p :class="ok ? \'是\' : \'否\'">', TEMPLATE_CONTEXT)
        self.assertEqual(_contents(terms), ["是", "否"])
        self.assertTrue(all(t.kind == TermKind.SINGLE_QUOTE for t in terms))


class TestRejections(unittest.TestCase):
    """Test literals that must never become terms."""

    def test_file_path(self):
        self.assertEqual(extract('const src = "./assets/图标.png"'), [])
        self.assertEqual(extract("<img src='./assets/logo.png' alt='图片.png'>", TEMPLATE_CONTEXT), [])

    def test_code(self):
        self.assertEqual(extract('const s = "console.log(错误)"'), [])

    def test_comments(self):
        terms = extract("// '注释'\n/* \"块\" */\nconst a = '保存'")
        self.assertEqual(_contents(terms), ["保存"])

    def test_markup_comment(self):
        terms = extract("<!-- <span>旧的</span> -->\n<span>新的</span>", TEMPLATE_CONTEXT)
        self.assertEqual(_contents(terms), ["新的"])

    def test_already_localized(self):
        self.assertEqual(extract("const a = t('保存')"), [])
        self.assertEqual(extract("<span>{{ $t('保存') }}</span>", TEMPLATE_CONTEXT), [])
        self.assertEqual(extract("const m = i18n.global.t(`共${n}条`)"), [])

    def test_configured_lookup_name(self):
        self.assertEqual(extract("const a = tr('保存')", lookup_names=("tr",)), [])
        self.assertEqual(len(extract("const a = tr('保存')")), 1)

    def test_props_declaration(self):
        buf = "const props = defineProps({ title: { type: String, default: '标题' } })\nconst a = '保存'"
        self.assertEqual(_contents(extract(buf)), ["保存"])

    def test_module_lines(self):
        buf = "export { a } from '模块'\nimport b from '组件'\nconst c = '保存'"
        self.assertEqual(_contents(extract(buf)), ["保存"])


class TestTemplateLiterals(unittest.TestCase):
    """Test backtick literals."""

    def test_templated(self):
        terms = extract("const m = `共${count}条记录`")
        self.assertEqual(len(terms), 1)
        self.assertEqual(terms[0].kind, TermKind.TEMPLATE)
        self.assertEqual(terms[0].content, "共${count}条记录")
        self.assertTrue(terms[0].is_templated)

    def test_plain_backtick(self):
        terms = extract("const m = `提示`")
        self.assertEqual(terms[0].kind, TermKind.TEMPLATE)
        self.assertFalse(terms[0].is_templated)


class TestBodies(unittest.TestCase):
    """Test tag-body and element-body scanners."""

    def test_tag_body(self):
        terms = extract("<el-button>查询</el-button>", TEMPLATE_CONTEXT)
        kinds = [t.kind for t in terms]
        self.assertEqual(kinds, [TermKind.TAG_BODY, TermKind.ELEMENT_BODY])
        self.assertEqual(terms[0].span, ">查询<")
        self.assertEqual(terms[1].tag_name, "el-button")
        self.assertEqual(terms[1].tag_attributes, "")

    def test_element_attributes_are_kept(self):
        buf = '<el-button type="primary" @click="save">保存</el-button>'
        body = [t for t in extract(buf, TEMPLATE_CONTEXT) if t.kind == TermKind.ELEMENT_BODY]
        self.assertEqual(len(body), 1)
        self.assertEqual(body[0].tag_attributes, ' type="primary" @click="save"')

    def test_multiline_body_whitespace_is_collapsed(self):
        terms = extract("<p>\n  第一行\n  第二行\n</p>", TEMPLATE_CONTEXT)
        self.assertEqual(_contents(terms), ["第一行 第二行"])

    def test_bodies_with_interpolation_are_skipped(self):
        self.assertEqual(extract("<span>{{ n }}个</span>", TEMPLATE_CONTEXT), [])

    def test_no_bodies_in_script_context(self):
        self.assertEqual(extract("<span>你好</span>", SCRIPT_CONTEXT), [])

    def test_jsx_body(self):
        terms = extract("const v = <div>你好</div>", SCRIPT_CONTEXT, jsx=True)
        self.assertEqual([t.kind for t in terms], [TermKind.TAG_BODY])
        self.assertEqual(terms[0].span, ">你好<")


class TestFieldAssignments(unittest.TestCase):
    """Test ``i18n: '…'`` properties."""

    def test_field(self):
        terms = extract("const cols = [{ i18n: '名称', prop: 'name' }]")
        self.assertEqual(len(terms), 1)
        self.assertEqual(terms[0].kind, TermKind.FIELD)
        self.assertEqual(terms[0].field_name, "i18n")
        self.assertEqual(terms[0].span, "i18n: '名称'")
        self.assertEqual(terms[0].content, "名称")

    def test_custom_field_names(self):
        terms = extract("const c = { labelKey: '名称' }", field_names=("labelKey",))
        self.assertEqual([t.kind for t in terms], [TermKind.FIELD])

    def test_other_properties_are_single_quotes(self):
        terms = extract("const c = { label: '名称' }")
        self.assertEqual([t.kind for t in terms], [TermKind.SINGLE_QUOTE])


if __name__ == "__main__":
    unittest.main()
