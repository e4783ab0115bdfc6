"""Test module for xml_subset_parser package initialization."""


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xml_subset_parser

    # Assert
    assert isinstance(xml_subset_parser.__version__, str)
    assert xml_subset_parser.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    import xml_subset_parser

    assert xml_subset_parser.__author__ == "XML Subset Parser Team"


def test_package_all_exports() -> None:
    """Test that __all__ names resolve and cover both API levels."""
    import xml_subset_parser

    for name in xml_subset_parser.__all__:
        assert hasattr(xml_subset_parser, name), name

    for name in ("tokenize", "build_tree", "parse", "parse_string", "XMLSubsetParser"):
        assert name in xml_subset_parser.__all__


def test_top_level_pipeline() -> None:
    """Test the two stages composed through the package namespace."""
    import xml_subset_parser

    tokens = xml_subset_parser.tokenize("<root></root>")
    document = xml_subset_parser.build_tree(tokens)

    assert document.root.tag_name == "root"
