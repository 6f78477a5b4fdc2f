"""
Tests for building pip requirement strings.
"""

from pipconverge.core.services.pip_requirements import pip_requirements


class TestPipRequirements:
    def test_bare_name(self):
        assert pip_requirements(["django"], [""]) == ["django"]

    def test_none_version(self):
        assert pip_requirements(["django"], [None]) == ["django"]

    def test_exact_version(self):
        assert pip_requirements(["django"], ["1.8.3"]) == ["django==1.8.3"]

    def test_version_is_trimmed(self):
        assert pip_requirements(["django"], ["  1.8.3 "]) == ["django==1.8.3"]

    def test_operator_version_concatenated(self):
        assert pip_requirements(["a"], [">=2.0"]) == ["a>=2.0"]
        assert pip_requirements(["a"], ["~=1.4"]) == ["a~=1.4"]

    def test_url_name_ignores_version(self):
        url = "git+https://github.com/boto/boto.git#egg=boto"
        assert pip_requirements([url], ["2.0"]) == [url]

    def test_positional_pairing_with_url_version(self):
        result = pip_requirements(["a", "b"], ["1.0", "git+url://x#egg=b"])
        assert result == ["a==1.0", "git+url://x#egg=b"]

    def test_missing_versions_mean_unpinned(self):
        assert pip_requirements(["a", "b"], ["1.0"]) == ["a==1.0", "b"]

    def test_raw_names_by_default(self):
        assert pip_requirements(["Django_Foo[bar]"], ["1.0"]) == ["Django_Foo[bar]==1.0"]

    def test_parse_uses_normalized_names(self):
        assert pip_requirements(["Django_Foo[bar]"], ["1.0"], parse=True) == ["django-foo==1.0"]

    def test_parse_turns_url_into_name(self):
        url = "git+https://github.com/boto/boto.git#egg=boto"
        assert pip_requirements([url], [""], parse=True) == ["boto"]

    def test_empty(self):
        assert pip_requirements([], []) == []
