import json
from pathlib import Path

import pytest

from scrape_it import FilePerDomainStrategy, FilePerUrlStrategy, create_persistence_strategy
from scrape_it.utils import url_to_filename


class TestPersistence:
    """Test suite for persistence layer functionality."""

    @pytest.mark.asyncio
    async def test_file_per_url(self, tmp_path):
        """Test FilePerUrlStrategy."""
        strategy = create_persistence_strategy("file_per_url", str(tmp_path))
        assert isinstance(strategy, FilePerUrlStrategy)

        first = await strategy.save("https://www.example.com/", {"title": "Home"})
        second = await strategy.save("https://example.com/docs/page?id=2", {"title": "Page", "tags": ["a"]})
        await strategy.finalize()

        assert Path(first) == tmp_path / "example.com" / "index.json"
        assert Path(second) == tmp_path / "example.com" / "docs_page_id_2.json"
        assert json.loads(Path(second).read_text(encoding="utf-8")) == {"title": "Page", "tags": ["a"]}
        assert len(strategy.get_saved_files()) == 2

    @pytest.mark.asyncio
    async def test_file_per_domain(self, tmp_path):
        """Test FilePerDomainStrategy."""
        strategy = create_persistence_strategy("file_per_domain", str(tmp_path))
        assert isinstance(strategy, FilePerDomainStrategy)

        path = await strategy.save("https://example.com/a", {"n": 1})
        await strategy.save("https://example.com/b", {"n": 2})
        await strategy.save("https://test.org/a", {"n": 3})

        # Nothing is written before finalize
        assert not Path(path).exists()

        await strategy.finalize()

        saved = json.loads(Path(path).read_text(encoding="utf-8"))
        assert saved == [
            {"url": "https://example.com/a", "data": {"n": 1}},
            {"url": "https://example.com/b", "data": {"n": 2}},
        ]
        files = strategy.get_saved_files()
        assert len(files) == 2
        assert files[0].urls == ["https://example.com/a", "https://example.com/b"]

    def test_unknown_strategy(self, tmp_path):
        with pytest.raises(ValueError):
            create_persistence_strategy("per_moon_phase", str(tmp_path))

    def test_long_url_filename_is_truncated_with_hash(self):
        url = "https://example.com/" + "segment/" * 40
        other = url + "x"

        name = url_to_filename(url)

        assert len(name) == 120
        assert name.endswith(".json")
        assert name != url_to_filename(other)
