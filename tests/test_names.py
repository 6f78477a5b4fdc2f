"""
Tests for package name normalization.
"""

import pytest

from pipconverge.core.services.pip_names import normalize_package_name


class TestNormalizePackageName:
    def test_plain_name(self):
        assert normalize_package_name("django") == "django"

    def test_case_folding(self):
        assert normalize_package_name("Django") == normalize_package_name("DJANGO") == "django"

    def test_underscores_become_hyphens(self):
        assert normalize_package_name("DJANGO_foo") == "django-foo"
        assert normalize_package_name("django-foo") == "django-foo"

    def test_extras_stripped(self):
        assert normalize_package_name("django[foo]") == "django"
        assert normalize_package_name("requests[security,socks]") == "requests"

    def test_egg_fragment(self):
        raw = "git+https://github.com/django/django.git#egg=Django"
        assert normalize_package_name(raw) == "django"

    def test_egg_fragment_with_extras(self):
        raw = "git+https://example.com/repo.git#egg=My_Pkg[extra]"
        assert normalize_package_name(raw) == "my-pkg"

    def test_url_without_egg_is_kept(self):
        raw = "https://example.com/pkg-1.0.tar.gz"
        assert normalize_package_name(raw) == raw

    def test_pathological_input_lowercased(self):
        assert normalize_package_name("Some Thing?!") == "some thing?!"

    def test_empty(self):
        assert normalize_package_name("") == ""

    @pytest.mark.parametrize(
        "raw",
        [
            "Django",
            "DJANGO_foo",
            "django[foo]",
            "git+https://x.invalid/r.git#egg=Foo_Bar",
            "x://y#egg=a#egg=b",
            "[x]",
            "a[b]c[d]",
        ],
    )
    def test_idempotent(self, raw):
        once = normalize_package_name(raw)
        assert normalize_package_name(once) == once
