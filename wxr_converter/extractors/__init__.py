"""
Extractors for WordPress export files.

This subpackage parses a WXR export into a tree of
:class:`~wxr_converter.extractors.xml_element.WXRElement` and walks it once
to build the channel, the authors and the items.
"""
