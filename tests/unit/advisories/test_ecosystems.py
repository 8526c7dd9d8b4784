import pytest

from sbom_cli.advisories.ecosystems import get_ghsa_ecosystem_from_package_url, get_purl_type


@pytest.mark.parametrize("purl, ecosystem", [
    ("pkg:npm/lodash@4.17.20", "NPM"),
    ("pkg:npm/%40babel/core@7.22.0", "NPM"),
    ("pkg:pypi/requests@2.31.0", "PIP"),
    ("pkg:gem/rails@7.0.0", "RUBYGEMS"),
    ("pkg:cargo/serde@1.0.188", "RUST"),
    ("pkg:golang/github.com/gin-gonic/gin@v1.9.1", "GO"),
    ("pkg:maven/org.apache.commons/commons-text@1.9", "MAVEN"),
    ("pkg:nuget/Newtonsoft.Json@13.0.1", "NUGET"),
    ("pkg:composer/laravel/framework@10.0.0", "COMPOSER"),
    ("pkg:deb/debian/curl@7.50.3", None),
    ("pkg:docker/nginx@1.25", None),
    (None, None),
    ("", None),
])
def test_get_ghsa_ecosystem_from_package_url(purl, ecosystem):
    assert get_ghsa_ecosystem_from_package_url(purl) == ecosystem


def test_get_purl_type_falls_back_for_invalid_package_urls():
    assert get_purl_type("pkg:npm/lodash@4.17.20") == "npm"
    assert get_purl_type("npm/lodash") == "npm"
    assert get_purl_type(None) is None
