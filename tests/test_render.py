"""
render.py（HTML 生成）のテスト
"""

from rm_site.models import CATEGORY_INFO, CanonicalRecord, Category
from rm_site.render import INDEX_PAGE, STYLESHEET, render_category_page, render_site


def rec(rid, date, **kwargs):
    return CanonicalRecord(id=rid, kind="published_papers", date=date, year=date[:4], **kwargs)


def grouped_with(category, records):
    grouped = {c: [] for c in Category}
    grouped[category] = records
    return grouped


class TestRenderSite:
    """出力ファイルの組み立て"""

    def test_every_category_has_a_page(self):
        """0 件のカテゴリも空のページを出力する（前回の内容を残さない）"""
        records = [rec("a", "2018-01-00", title="Old"), rec("b", "2021-01-00", title="New")]
        pages = render_site(grouped_with(Category.JOURNAL, records), updated_date="2024-01-02", site_title="Lab")
        expected = {info["page"] for info in CATEGORY_INFO.values() if info["page"]}
        assert set(pages) == expected | {INDEX_PAGE, STYLESHEET}
        assert "No items." in pages["other-conferences.html"]
        assert "Old" not in pages["other-conferences.html"]
        assert "No items." not in pages["journal-papers.html"]

    def test_index_links(self):
        records = [rec("a", "2018-01-00", title="Old")]
        pages = render_site(grouped_with(Category.BOOK_CHAPTER, records), updated_date="2024-01-02", site_title="Lab")
        index = pages[INDEX_PAGE]
        assert 'href="book-chapters.html"' in index
        assert 'href="journal-papers.html"' not in index, "0 件のカテゴリにはリンクしない"
        assert "2024-01-02" in index


class TestCategoryPage:
    """カテゴリページ"""

    def test_newest_first_with_serials(self):
        records = [rec("a", "2018-01-00", title="Old Paper"), rec("b", "2021-01-00", title="New Paper")]
        html = render_category_page(Category.JOURNAL, records, updated_date="2024-01-02", site_title="Lab")
        assert html.index("New Paper") < html.index("Old Paper")
        assert html.index("[2]") < html.index("[1]")
        assert html.index(">2021<") < html.index(">2018<")

    def test_escaping(self):
        records = [rec("a", "2020-01-00", title="<b>Bold</b> & more")]
        html = render_category_page(Category.JOURNAL, records, updated_date="2024-01-02", site_title="Lab")
        assert "<b>Bold</b>" not in html
        assert "&lt;b&gt;Bold&lt;/b&gt; &amp; more" in html

    def test_link(self):
        records = [
            rec("a", "2020-01-00", title="Linked", url="https://doi.org/10.1/x"),
            rec("b", "2019-01-00", title="Unlinked"),
        ]
        html = render_category_page(Category.JOURNAL, records, updated_date="2024-01-02", site_title="Lab")
        assert html.count("[link]") == 1
        assert 'href="https://doi.org/10.1/x"' in html

    def test_labels(self):
        html = render_category_page(Category.BOOK_CHAPTER, [rec("a", "2020-01-00", title="T")],
                                    updated_date="2024-01-02", site_title="Lab")
        assert "Book Chapters" in html
        assert "分担執筆" in html
        assert "Lab" in html
