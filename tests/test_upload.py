import pytest

from pgcatalog.upload import FileDTO, package_type_resolver

EXTENSION_TYPES = {
    "txt": "Text",
    "fastq.gz": "FASTQ",
    "gz": "ZIP",
    "dat": "Data",
    "lay": "Persyst",
}


@pytest.fixture
def processed():
    files = [
        FileDTO(upload_id="0", target_path="path1", target_name="file1.txt"),
        FileDTO(upload_id="1", target_path="path1", target_name="file1.fastq.gz"),
        FileDTO(upload_id="2", target_path="path1", target_name="file1.gz"),
        FileDTO(upload_id="3", target_path="path1", target_name="persyst.dat"),
        FileDTO(upload_id="4", target_path="path1", target_name="persyst.lay"),
        FileDTO(upload_id="5", target_path="path1", target_name="persyst.unknown"),
        FileDTO(upload_id="6", target_path="path2", target_name="persyst2.lay"),
        FileDTO(upload_id="7", target_path="path1", target_name="persyst2.dat"),
    ]
    return package_type_resolver(files, EXTENSION_TYPES)


def test_basic_extensions(processed):
    assert processed[0].file_type == "Text"
    assert processed[1].file_type == "FASTQ"
    assert processed[2].file_type == "ZIP"
    assert processed[5].file_type == "GenericData"


def test_persyst_merging(processed):
    assert processed[3].file_type == "Persyst"
    assert processed[4].file_type == "Persyst"
    assert processed[3].merge_package_id == "4"
    assert processed[4].merge_package_id == "4"
    assert processed[6].merge_package_id == ""
    assert processed[7].file_type == "Data"


def test_returns_same_list():
    files = [FileDTO(upload_id="0", target_path="p", target_name="a.txt")]
    assert package_type_resolver(files, EXTENSION_TYPES) is files
    assert files[0].file_type == "Text"


def test_preset_type_is_kept():
    files = [FileDTO(upload_id="0", target_path="p", target_name="a.txt", file_type="ZIP")]
    result = package_type_resolver(files, EXTENSION_TYPES)
    assert result[0].file_type == "ZIP"


def test_name_without_extension_is_generic():
    files = [FileDTO(upload_id="0", target_path="p", target_name="README")]
    assert package_type_resolver(files, EXTENSION_TYPES)[0].file_type == "GenericData"