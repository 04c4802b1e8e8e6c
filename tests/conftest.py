"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

import pytest

from xmledit.markup_transcoder.xml_tools import SAMPLE_XML

# boto3 and urllib3 log connection details at DEBUG/INFO when the app
# logger is turned up by CLI tests.
logging.getLogger("botocore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture
def sample_xml() -> str:
    """The built-in sample document."""
    return SAMPLE_XML


@pytest.fixture
def revised_xml() -> str:
    """A small document that already carries one revision entry."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<topic id="t1">\n'
        '  <Revisions>\n'
        '    <Revision>\n'
        '      <RevisionNumber>1.1</RevisionNumber>\n'
        '      <RevisionDate>2024-01-15</RevisionDate>\n'
        '      <RevisionComment>Initial review.</RevisionComment>\n'
        '    </Revision>\n'
        '  </Revisions>\n'
        '  <title>Pump Maintenance</title>\n'
        '  <sectionRef ref="seals.xml"/>\n'
        '</topic>'
    )
