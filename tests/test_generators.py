import unittest
from datetime import datetime, timezone

from sbom_analyzer.generators import (
    SBOMGenerator, CycloneDXFormatter, SPDXFormatter, SBOMFormat, split_dependency
)
from sbom_analyzer.models import ScannerTool

from tests.helpers import make_record

FIXED_TIME = datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)


class TestSplitDependency(unittest.TestCase):
    def test_plain(self) -> None:
        self.assertEqual(split_dependency("lodash@4.17.21"), ("lodash", "4.17.21"))

    def test_scoped(self) -> None:
        self.assertEqual(split_dependency("@babel/core@7.22.0"), ("@babel/core", "7.22.0"))

    def test_missing_version(self) -> None:
        self.assertEqual(split_dependency("express"), ("express", "unknown"))
        self.assertEqual(split_dependency("@types/node"), ("@types/node", "unknown"))
        self.assertEqual(split_dependency("react@"), ("react", "unknown"))


class TestCycloneDXFormatter(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = make_record("acme/widget", description="A widget")

    def test_single_component(self) -> None:
        document = CycloneDXFormatter().format_sbom(ScannerTool.SYFT, self.repo, ["lodash@4.17.21"], FIXED_TIME)

        self.assertEqual(len(document["components"]), 1)
        component = document["components"][0]
        self.assertEqual(component["name"], "lodash")
        self.assertEqual(component["version"], "4.17.21")
        self.assertEqual(component["purl"], "pkg:npm/lodash@4.17.21")
        self.assertEqual(component["type"], "library")
        self.assertEqual(document["dependencies"], [{"ref": "lodash@4.17.21", "dependsOn": []}])

    def test_metadata(self) -> None:
        document = CycloneDXFormatter().format_sbom(ScannerTool.OWASP, self.repo, [], FIXED_TIME)

        self.assertEqual(document["bomFormat"], "CycloneDX")
        self.assertEqual(document["specVersion"], "1.4")
        self.assertEqual(document["metadata"]["timestamp"], "2024-05-06T07:08:09.123Z")
        self.assertEqual(document["metadata"]["tools"], [{"vendor": "OWASP", "name": "owasp", "version": "8.3.1"}])
        component = document["metadata"]["component"]
        self.assertEqual(component["bom-ref"], "acme/widget")
        self.assertEqual(component["purl"], "pkg:github/acme/widget")
        self.assertEqual(component["description"], "A widget")
        self.assertEqual(document["components"], [])

    def test_scoped_purl_is_encoded(self) -> None:
        document = CycloneDXFormatter().format_sbom(ScannerTool.SYFT, self.repo, ["@babel/core@7.0.0"], FIXED_TIME)
        self.assertEqual(document["components"][0]["purl"], "pkg:npm/%40babel/core@7.0.0")


class TestSPDXFormatter(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = make_record("acme/widget")

    def test_document_shape(self) -> None:
        document = SPDXFormatter().format_sbom(ScannerTool.SYFT, self.repo, ["lodash@4.17.21", "@babel/core@7.0.0"],
                                               FIXED_TIME)

        self.assertEqual(document["spdxVersion"], "SPDX-2.3")
        self.assertEqual(document["dataLicense"], "CC0-1.0")
        self.assertEqual(document["SPDXID"], "SPDXRef-DOCUMENT")
        self.assertEqual(document["documentNamespace"],
                         f"https://sbom.example.com/acme/widget/syft/{int(FIXED_TIME.timestamp() * 1000)}")
        self.assertEqual(document["creationInfo"]["creators"], ["Tool: syft", "Organization: SBOM Analyzer"])

        ids = [package["SPDXID"] for package in document["packages"]]
        self.assertEqual(ids, ["SPDXRef-acme-widget", "SPDXRef-lodash", "SPDXRef--babel-core"])
        self.assertEqual(document["packages"][1]["versionInfo"], "4.17.21")

    def test_contains_relationships_from_root(self) -> None:
        document = SPDXFormatter().format_sbom(ScannerTool.OWASP, self.repo, ["lodash@4.17.21"], FIXED_TIME)

        self.assertEqual(document["relationships"], [{
            "spdxElementId": "SPDXRef-acme-widget",
            "relationshipType": "CONTAINS",
            "relatedSpdxElement": "SPDXRef-lodash"
        }])


class TestSBOMGenerator(unittest.TestCase):
    def test_generates_both_formats_with_shared_timestamp(self) -> None:
        generator = SBOMGenerator(clock=lambda: FIXED_TIME)

        documents = generator.generate("syft", make_record(), ["lodash@4.17.21"])

        self.assertEqual(set(documents), {f.value for f in SBOMFormat})
        self.assertEqual(documents["cyclonedx"]["metadata"]["timestamp"],
                         documents["spdx"]["creationInfo"]["created"])
        self.assertEqual(generator.get_statistics()["sboms_generated"], 2)

    def test_generate_and_store_saves_into_catalog(self) -> None:
        saved = []

        class Catalog:
            def save_sbom(self, tool, repo_id, sbom_format, document):
                saved.append((tool, repo_id, sbom_format))

        repo = make_record()
        SBOMGenerator(clock=lambda: FIXED_TIME).generate_and_store(Catalog(), ScannerTool.OWASP, repo, [])

        self.assertEqual(sorted(entry[2] for entry in saved), ["cyclonedx", "spdx"])
        self.assertTrue(all(entry[1] == repo.id for entry in saved))
