# -*- coding: utf-8 -*-
"""
Tests for the context classifiers.

Offsets are always taken from the buffer itself (``buf.index(...)``) so the fixtures stay readable.
"""
from __future__ import annotations

import unittest

from batch_i18n.engine.classify import (
    Context,
    attribute_context,
    classify_occurrence,
    contains_target,
    in_binding_expression,
    in_interpolation,
    in_props_declaration,
    is_already_localized,
    is_code_like,
    is_expression_like,
    is_file_path,
    on_module_line,
    open_binding,
)


class TestLiteralShape(unittest.TestCase):
    """Test the shape predicates on literal content."""

    def test_contains_target(self):
        self.assertTrue(contains_target("保存"))
        self.assertTrue(contains_target("Save 保存"))
        self.assertFalse(contains_target("save"))

    def test_code_like(self):
        """Test code signatures are rejected."""
        self.assertTrue(is_code_like("console.log(错误)"))
        self.assertTrue(is_code_like("const a = 名称"))
        self.assertTrue(is_code_like("getData()"))
        self.assertTrue(is_code_like("ElMessage.success(成功)"))

    def test_unit_labels_are_not_code(self):
        """Test labels with units in parentheses pass the benign-label exemption."""
        self.assertFalse(is_code_like("温度(℃)"))
        self.assertFalse(is_code_like("上调能力(kW)"))
        self.assertFalse(is_code_like("请输入名称"))

    def test_file_path(self):
        self.assertTrue(is_file_path("./assets/logo.png"))
        self.assertTrue(is_file_path("@/views/首页.vue"))
        self.assertTrue(is_file_path("图片.png"))
        self.assertTrue(is_file_path("img/背景.webp"))
        self.assertFalse(is_file_path("请输入"))

    def test_expression_like(self):
        self.assertTrue(is_expression_like("ok ? '是' : '否'"))
        self.assertTrue(is_expression_like("a === 1"))
        self.assertTrue(is_expression_like("a && b"))
        self.assertFalse(is_expression_like("保存"))


class TestAlreadyLocalized(unittest.TestCase):
    """Test detection of text that already sits in a lookup call."""

    def test_window_before_offset(self):
        buf = "$t('保存')"
        self.assertTrue(is_already_localized(buf, buf.index("'"), "'保存'"))

    def test_plain_literal(self):
        buf = "const a = '保存'"
        self.assertFalse(is_already_localized(buf, buf.index("'"), "'保存'"))

    def test_span_holding_a_call(self):
        self.assertTrue(is_already_localized("", 0, "i18n.global.t('保存')"))

    def test_configured_name(self):
        """Test a custom lookup name only counts when configured."""
        buf = "tr('保存')"
        self.assertTrue(is_already_localized(buf, 3, "'保存'", ("tr",)))
        self.assertFalse(is_already_localized(buf, 3, "'保存'"))

    def test_similar_identifier_is_not_a_lookup(self):
        buf = "alert('保存')"
        self.assertFalse(is_already_localized(buf, buf.index("'"), "'保存'"))

    def test_without_offset_checks_every_occurrence(self):
        buf = "a '保存' b t('保存')"
        self.assertTrue(is_already_localized(buf, None, "'保存'"))
        self.assertFalse(is_already_localized("a '保存' b", None, "'保存'"))


class TestScriptSkips(unittest.TestCase):
    """Test props declarations and module lines."""

    def test_props_declaration(self):
        buf = "const p = defineProps({ title: { default: '标题' } })\nconst x = '保存'"
        self.assertTrue(in_props_declaration(buf, buf.index("'标题'")))
        self.assertFalse(in_props_declaration(buf, buf.index("'保存'")))

    def test_with_defaults(self):
        buf = "withDefaults(defineProps<P>(), { label: '默认' })"
        self.assertTrue(in_props_declaration(buf, buf.index("'默认'")))

    def test_module_lines(self):
        buf = "import a from './中文'\nexport { b } from '模块'\nexport const c = '保存'"
        self.assertTrue(on_module_line(buf, buf.index("'./中文'")))
        self.assertTrue(on_module_line(buf, buf.index("'模块'")))
        self.assertFalse(on_module_line(buf, buf.index("'保存'")))


class TestMarkupContexts(unittest.TestCase):
    """Test interpolation and binding detection."""

    def test_interpolation(self):
        buf = "<p>{{ ok ? '是' : '否' }}</p>"
        self.assertTrue(in_interpolation(buf, buf.index("'是'")))
        buf = "<p>{{ a }} '是'</p>"
        self.assertFalse(in_interpolation(buf, buf.index("'是'")))

    def test_open_binding(self):
        buf = '<el-button @click="confirm(\'删除\')">'
        opener = open_binding(buf, buf.index("'删除'"))
        self.assertIsNotNone(opener)
        self.assertEqual(opener.prefix, "@")
        self.assertEqual(opener.name, "click")
        self.assertFalse(opener.is_bound_attribute)

    def test_closed_binding(self):
        buf = '<el-button @click="save" title=\'保存\'>'
        self.assertFalse(in_binding_expression(buf, buf.index("'保存'")))

    def test_escaped_quote_keeps_binding_open(self):
        buf = '<a :title="x + \\"y\\" + \'保存\'">'
        self.assertTrue(in_binding_expression(buf, buf.index("'保存'")))

    def test_v_bind_is_bound_attribute(self):
        buf = '<a v-bind:title="\'保存\'">'
        opener = open_binding(buf, buf.index("'保存'"))
        self.assertTrue(opener.is_bound_attribute)

    def test_attribute_context_plain(self):
        buf = '<el-input placeholder="请输入">'
        attr = attribute_context(buf, buf.index('"请输入"'), '"请输入"')
        self.assertTrue(attr.is_attribute)
        self.assertTrue(attr.needs_binding)
        self.assertEqual(attr.attr_name, "placeholder")
        self.assertEqual(attr.start, buf.index("placeholder"))

    def test_attribute_context_bound(self):
        buf = '<el-input :placeholder="\'请输入\'">'
        attr = attribute_context(buf, buf.index("'请输入'"), "'请输入'")
        self.assertTrue(attr.is_attribute)
        self.assertFalse(attr.needs_binding)
        self.assertEqual(attr.attr_name, "placeholder")


class TestClassifyOccurrence(unittest.TestCase):
    """Test the call-site decision for quoted literals."""

    def _classify(self, buf, span):
        return classify_occurrence(buf, buf.index(span), span)

    def test_plain_attribute(self):
        cls = self._classify('<el-input placeholder="请输入">', '"请输入"')
        self.assertEqual(cls.context, Context.PLAIN_ATTRIBUTE)
        self.assertEqual(cls.attr_name, "placeholder")
        self.assertEqual(cls.quote, '"')

    def test_bound_attribute(self):
        cls = self._classify('<el-input :placeholder="\'请输入\'">', "'请输入'")
        self.assertEqual(cls.context, Context.BOUND_ATTRIBUTE)
        self.assertEqual(cls.quote, '"')

    def test_interpolation(self):
        cls = self._classify("<p>{{ ok ? '是' : '否' }}</p>", "'否'")
        self.assertEqual(cls.context, Context.INTERPOLATION)

    def test_binding_expression(self):
        cls = self._classify('<el-button @click="confirm(\'删除\')">', "'删除'")
        self.assertEqual(cls.context, Context.BINDING_EXPRESSION)

    def test_body(self):
        cls = self._classify('<span>"你好"</span>', '"你好"')
        self.assertEqual(cls.context, Context.BODY)

    def test_raw_bound_value_is_left_alone(self):
        """Test :title="文本" (an expression, not a literal) gets no call site."""
        self.assertIsNone(self._classify('<el-input :title="文本">', '"文本"'))

    def test_literal_inside_plain_attribute_text(self):
        """Test quotes embedded in a plain attribute value are left alone."""
        self.assertIsNone(self._classify('<div title="说明 \'保存\' 文本">', "'保存'"))

    def test_v_directive_is_not_a_plain_attribute(self):
        cls = self._classify('<div v-if="a" v-show="\'显示\'">', "'显示'")
        self.assertEqual(cls.context, Context.BINDING_EXPRESSION)


if __name__ == "__main__":
    unittest.main()
