"""
build.py（ビルドパイプライン・CLI）のテスト
"""

import io
import json

import pytest
from openpyxl import load_workbook

from rm_site import build
from rm_site.build import atomic_write, build_outputs, load_input_json, main, write_outputs
from shared.api_client import ResearchmapAPIError


class TestBuildOutputs:
    """出力の組み立て（ファイルには書かない）"""

    def test_counts(self, sample_data, settings, now):
        _, counts = build_outputs(sample_data, settings, now, review_book=False)
        assert counts.permalink == "read0001"
        assert counts.updatedAt == "2024-01-02T03:04:05Z"
        assert counts.papers_total == 6
        assert counts.presentations_total == 3
        assert counts.journal == 2
        assert counts.int_conf == 1
        assert counts.book_chapters == 1
        assert counts.counts["review_article"] == 1
        assert counts.counts["conference_other"] == 0
        assert counts.counts["presentation_invited"] == 1
        assert counts.counts["presentation_international"] == 1
        assert counts.counts["presentation_domestic"] == 1
        assert [u.id for u in counts.unclassified] == ["p5"]

    def test_every_record_in_exactly_one_category(self, sample_data, settings, now):
        _, counts = build_outputs(sample_data, settings, now, review_book=False)
        assert sum(counts.counts.values()) == counts.papers_total + counts.presentations_total

    def test_output_paths(self, sample_data, settings, now, tmp_path):
        outputs, _ = build_outputs(sample_data, settings, now)
        names = {p.relative_to(tmp_path).as_posix() for p in outputs}
        assert {
            "publications/index.html",
            "publications/style.css",
            "publications/journal-papers.html",
            "publications/international-conferences.html",
            "publications/other-conferences.html",
            "publications/book-chapters.html",
            "publications/review-articles.html",
            "publications/invited-talks.html",
            "publications/presentations-international.html",
            "publications/presentations-domestic.html",
            "data/counts.json",
            "review/classification.xlsx",
        } == names
        assert not any(p.exists() for p in outputs), "build_outputs はファイルを書かない"

    def test_counts_json(self, sample_data, settings, now):
        outputs, _ = build_outputs(sample_data, settings, now, review_book=False)
        data = json.loads(outputs[settings.counts_path].decode("utf-8"))
        assert data["journal"] == 2
        assert data["int_conf"] == 1
        assert data["book_chapters"] == 1
        assert data["updatedAt"] == "2024-01-02T03:04:05Z"
        assert data["unclassified"][0]["title"] == "Mystery Item"

    def test_journal_page(self, sample_data, settings, now):
        outputs, _ = build_outputs(sample_data, settings, now, review_book=False)
        html = outputs[settings.pages_dir / "journal-papers.html"].decode("utf-8")
        citation = (
            "J. P. Smith and A. Brown, “Deep Learning for Sound,” IEEE Transactions on Audio, "
            "vol. 12, no. 3, pp. 100–110, 2021."
        )
        assert citation in html
        assert html.index("Deep Learning for Sound") < html.index("Older Journal Paper"), "新しい順に並ぶ"
        assert html.index("[2]") < html.index("[1]")

    def test_deterministic(self, sample_data, settings, now):
        first, _ = build_outputs(sample_data, settings, now, review_book=False)
        second, _ = build_outputs(sample_data, settings, now, review_book=False)
        assert first == second

    def test_review_book(self, sample_data, settings, now):
        outputs, _ = build_outputs(sample_data, settings, now)
        wb = load_workbook(io.BytesIO(outputs[settings.review_book_path]))
        assert wb.sheetnames == ["分類一覧", "未分類"]
        assert wb["分類一覧"].max_row == 1 + 9
        assert wb["未分類"].max_row == 1 + 1
        assert wb["未分類"].cell(row=2, column=11).value == "p5"

    def test_empty_input(self, settings, now):
        outputs, counts = build_outputs({"published_papers": [], "presentations": []}, settings, now)
        assert counts.papers_total == 0
        assert counts.unclassified == []
        assert settings.pages_dir / "index.html" in outputs


class TestWriteOutputs:
    """ファイルの書き出し"""

    def test_write(self, tmp_path):
        path = tmp_path / "a" / "b.txt"
        write_outputs({path: b"hello"})
        assert path.read_bytes() == b"hello"
        assert [p.name for p in path.parent.iterdir()] == ["b.txt"], "一時ファイルが残っています"

    def test_failed_replace_keeps_old_file(self, tmp_path, monkeypatch):
        path = tmp_path / "counts.json"
        path.write_bytes(b"old")

        def fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(build.os, "replace", fail)
        with pytest.raises(OSError):
            atomic_write(path, b"new")
        assert path.read_bytes() == b"old"
        assert [p.name for p in tmp_path.iterdir()] == ["counts.json"]


class TestInputJson:
    """保存済み JSON の読み込み"""

    def test_unwrap(self, tmp_path, sample_data):
        path = tmp_path / "saved.json"
        payload = {
            "researchmap_data": {
                "published_papers": {"items": sample_data["published_papers"]},
                "presentations": sample_data["presentations"],
                "awards": [{"rm:id": "x"}],
            }
        }
        path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        data = load_input_json(path)
        assert set(data) == {"published_papers", "presentations"}
        assert len(data["published_papers"]) == 6

    def test_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            load_input_json(path)


class TestMain:
    """CLI の終了コード"""

    def test_success_from_input_json(self, tmp_path, sample_data):
        src = tmp_path / "saved.json"
        src.write_text(json.dumps(sample_data, ensure_ascii=False), encoding="utf-8")
        out = tmp_path / "site"

        code = main(["--permalink", "read0001", "--out-dir", str(out), "--input-json", str(src), "--no-review-book"])

        assert code == 0
        counts = json.loads((out / "data" / "counts.json").read_text(encoding="utf-8"))
        assert counts["permalink"] == "read0001"
        assert (out / "publications" / "index.html").exists()
        assert not (out / "review").exists()

    def test_stale_page_overwritten(self, tmp_path, sample_data):
        """0 件になったカテゴリのページは前回の内容を残さない"""
        src = tmp_path / "saved.json"
        src.write_text(json.dumps(sample_data, ensure_ascii=False), encoding="utf-8")
        out = tmp_path / "site"
        stale = out / "publications" / "other-conferences.html"
        stale.parent.mkdir(parents=True)
        stale.write_text("<p>STALE ENTRY</p>", encoding="utf-8")

        assert main(["--permalink", "read0001", "--out-dir", str(out), "--input-json", str(src), "--no-review-book"]) == 0
        html = stale.read_text(encoding="utf-8")
        assert "STALE ENTRY" not in html
        assert "No items." in html

    def test_fetch_failure_writes_nothing(self, tmp_path, monkeypatch):
        async def failing_fetch(settings):
            raise ResearchmapAPIError("HTTP 500")

        monkeypatch.setattr(build, "fetch_data", failing_fetch)
        out = tmp_path / "site"

        code = main(["--permalink", "read0001", "--out-dir", str(out)])

        assert code == 1
        assert not out.exists(), "取得失敗時は何も書き出さない"

    def test_fetch_failure_keeps_previous_outputs(self, tmp_path, monkeypatch):
        async def failing_fetch(settings):
            raise ResearchmapAPIError("HTTP 503")

        monkeypatch.setattr(build, "fetch_data", failing_fetch)
        counts_path = tmp_path / "data" / "counts.json"
        counts_path.parent.mkdir(parents=True)
        counts_path.write_text('{"journal": 5}', encoding="utf-8")

        assert main(["--permalink", "read0001", "--out-dir", str(tmp_path)]) == 1
        assert counts_path.read_text(encoding="utf-8") == '{"journal": 5}'

    def test_missing_permalink(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RM_SITE_PERMALINK", "")
        assert main(["--out-dir", str(tmp_path / "site")]) == 1
