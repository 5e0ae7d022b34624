from scrape_it import Selection, parse
from scrape_it.dom import is_text_node


HTML = """
<div id="outer" class="box">
  <div id="inner" class="box">
    <span>one</span>
  </div>
  <span>two</span>
</div>
"""


class TestSelection:
    """Test suite for the Selection wrapper."""

    def test_find_deduplicates_overlapping_contexts(self):
        document = parse(HTML)
        boxes = Selection.of(document).find(".box")

        spans = boxes.find("span")

        assert len(boxes) == 2
        assert [span.get_text() for span in spans] == ["one", "two"]

    def test_eq_negative_counts_from_end(self):
        spans = Selection.of(parse(HTML)).find("span")

        assert spans.eq(-1).text() == "two"
        assert len(spans.eq(2)) == 0

    def test_text_nodes_are_direct_children_only(self):
        document = parse("<p>a<b>nested</b>b<!-- c --></p>")
        text_nodes = Selection.of(document).find("p").text_nodes()

        assert [str(node) for node in text_nodes] == ["a", "b"]
        assert all(is_text_node(node) for node in text_nodes)

    def test_closest_starts_at_text_node_parent(self):
        document = parse('<section id="s"><p>hello</p></section>')
        text = Selection.of(document).find("p").text_nodes()

        assert text.closest("section").attr("id") == "s"

    def test_accessors_on_empty_selection(self):
        empty = Selection()

        assert empty.text() == ""
        assert empty.html() is None
        assert empty.outer_html() == ""
        assert empty.val() is None
        assert empty.attr("href") is None
        assert empty.data() is None

    def test_multiple_select_value(self):
        document = parse(
            '<select multiple><option selected>a</option><option>b</option><option value="c" selected>C</option></select>'
        )

        assert Selection.of(document).find("select").val() == ["a", "c"]

    def test_select_without_selection_uses_first_option(self):
        document = parse('<select><option value="x">X</option><option value="y">Y</option></select>')

        assert Selection.of(document).find("select").val() == "x"

    def test_text_includes_script_style_and_template_bodies(self):
        document = parse("<div><p>a</p><script>var x;</script><style>b{}</style><template>t</template><!-- c --></div>")

        assert Selection.of(document).find("div").text() == "avar x;b{}t"
