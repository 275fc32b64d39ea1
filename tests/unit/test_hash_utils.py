"""해싱 유틸리티 유닛 테스트"""
import pytest
from metasearch.schemas import SearchQuery
from metasearch.utils.hash_utils import generate_cache_key, namespaced_key


class TestHashUtils:
    """해싱 유틸리티 테스트"""

    def test_generate_cache_key_consistency(self):
        """동일한 입력에 대한 일관성"""
        query = SearchQuery(text="러스트 소유권", engines=["brave"])
        assert generate_cache_key(query) == generate_cache_key(query)

    def test_generate_cache_key_format(self):
        """캐시 키 포맷 확인"""
        key = generate_cache_key(SearchQuery(text="rust", engines=["brave"]))
        assert key.startswith("search:")
        assert len(key) == 71  # "search:" (7) + SHA-256 (64)

    def test_generate_cache_key_custom_prefix(self):
        key = generate_cache_key(SearchQuery(text="rust", engines=["brave"]), prefix="s2")
        assert key.startswith("s2:")

    def test_generate_cache_key_normalizes_text(self):
        """공백/대소문자 정리 후 키 생성"""
        key1 = generate_cache_key(SearchQuery(text="Rust   Ownership", engines=["brave"]))
        key2 = generate_cache_key(SearchQuery(text="rust ownership", engines=["brave"]))
        assert key1 == key2

    @pytest.mark.parametrize(
        "namespace,expected",
        [("metasearch", "metasearch:search:abc"), ("", "search:abc")],
    )
    def test_namespaced_key(self, namespace, expected):
        assert namespaced_key(namespace, "search:abc") == expected
