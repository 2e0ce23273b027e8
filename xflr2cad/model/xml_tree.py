#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""

    Generic, order preserving xml to tree parser

    TreeNode                            - element with attributes, text and children
        |-- children                    - per tag either a single TreeNode or a list of TreeNode

    Element and attribute names are escaped to be usable as identifiers:

        '_'  ->  '__'
        '-'  ->  '_dash_'
        ':'  ->  '_colon_'
        '.'  ->  '_dot_'

    Text, comments and CDATA of an element are merged into its text.
"""

import os
import re
import xml.etree.ElementTree as ET                              # xml handling

from .errors                import ParseError

import logging
from typing                 import TypeAlias
logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)


# ---- Typing -------------------------------------

Slot: TypeAlias = "TreeNode | list[TreeNode]"


#-------------------------------------------------------------------------------
# name escaping
#-------------------------------------------------------------------------------

_ESCAPES = {'-' : '_dash_',
            ':' : '_colon_',
            '.' : '_dot_'}

_RESTORES = {v[1:-1] : k for k, v in _ESCAPES.items()}

_RESTORE_PATTERN = re.compile (r"__|_(dash|colon|dot)_")


def escape_name (name : str) -> str:
    """ returns xml name as a valid identifier - reversible with restore_name"""

    name = name.replace ('_', '__')
    for char, escaped in _ESCAPES.items():
        name = name.replace (char, escaped)
    return name


def restore_name (name : str) -> str:
    """ returns the original xml name of an escaped name"""

    def _restore (match : re.Match) -> str:
        if match.group(0) == '__':
            return '_'
        return _RESTORES [match.group(1)]

    return _RESTORE_PATTERN.sub (_restore, name)



#-------------------------------------------------------------------------------
# Tree
#-------------------------------------------------------------------------------

class TreeNode:
    """
    Element of a parsed xml document

    A child tag occuring once is stored as a single node, a repeated tag
    as a list of nodes in document order. Use 'all' or 'one' to access
    children independent of this.
    """

    def __init__(self, name : str, attributes : dict | None = None, text : str = ''):
        """
        Args:
            name: escaped name of the element
            attributes: escaped attribute names and their values
            text: text content of the element
        """
        self._name       = name
        self._attributes = dict(attributes) if attributes else {}
        self._text       = text
        self._children : dict [str, Slot] = {}
        self._nodes : list [TreeNode] = []                      # all children in document order


    def __repr__(self) -> str:
        # overwritten to get a nice print string
        info = f"'{self.tag}'"
        if self._nodes:
            info += f" children={len(self._nodes)}"
        elif self._text.strip():
            info += f" text='{self._text.strip()}'"
        return f"<{type(self).__name__} {info}>"


    @property
    def name (self) -> str:
        """ escaped name of element like 'y__position' """
        return self._name

    @property
    def tag (self) -> str:
        """ original xml name of element like 'y_position' """
        return restore_name (self._name)

    @property
    def attributes (self) -> dict:
        """ attributes with escaped names"""
        return self._attributes

    def attribute (self, name : str, default : str | None = None) -> str | None:
        """ value of attribute 'name' (original or escaped name)"""
        escaped = escape_name (name)
        if escaped in self._attributes:
            return self._attributes [escaped]
        return self._attributes.get (name, default)

    @property
    def text (self) -> str:
        """ text content - merged text, comments and CDATA"""
        return self._text

    def set_text (self, aStr : str):
        self._text = aStr if aStr is not None else ''

    @property
    def nodes (self) -> list['TreeNode']:
        """ all child nodes in document order"""
        return list(self._nodes)

    @property
    def children (self) -> dict [str, Slot]:
        """ child slots by escaped tag name - either a TreeNode or a list of TreeNode """
        return self._children


    def add_child (self, node : 'TreeNode'):
        """ adds node - a repeated tag turns the slot into a list """

        slot = self._children.get (node.name)
        if slot is None:
            self._children [node.name] = node
        elif isinstance (slot, list):
            slot.append (node)
        else:
            self._children [node.name] = [slot, node]
        self._nodes.append (node)


    def _key (self, tag : str) -> str:
        """ key of tag in children - tag can be original or escaped name"""
        escaped = escape_name (tag)
        return escaped if escaped in self._children else tag


    def all (self, tag : str) -> list['TreeNode']:
        """ list of all children 'tag' - empty list if there is none """

        slot = self._children.get (self._key (tag))
        if slot is None:
            return []
        elif isinstance (slot, list):
            return list (slot)
        else:
            return [slot]


    def one (self, tag : str) -> 'TreeNode':
        """ the (first) child 'tag' - raises KeyError if there is none """

        nodes = self.all (tag)
        if not nodes:
            raise KeyError (tag)
        return nodes[0]


    def find (self, path : str) -> 'TreeNode | None':
        """ follows a path like 'Plane/Inertia/Point_Mass' along the first occurences """

        node = self
        for tag in path.strip('/').split('/'):
            nodes = node.all (tag)
            if not nodes:
                return None
            node = nodes[0]
        return node


    def text_of (self, path : str, default : str | None = None) -> str | None:
        """ stripped text of the node at path - default if path doesn't exist """

        node = self.find (path)
        if node is None:
            return default
        return node.text.strip()



#-------------------------------------------------------------------------------
# Parser
#-------------------------------------------------------------------------------

def _new_parser () -> ET.XMLParser:
    """ xml parser which keeps comments - they will be merged into text"""
    return ET.XMLParser (target=ET.TreeBuilder(insert_comments=True))


def _as_node (element : ET.Element) -> TreeNode:
    """ recursively converts an ElementTree element into a TreeNode"""

    attributes = {escape_name (k) : v for k, v in element.attrib.items()}
    node = TreeNode (escape_name (element.tag), attributes)

    pieces = []                                     # text pieces which are not only blanks
    if element.text and element.text.strip():
        pieces.append (element.text)

    for child in element:
        if child.tag is ET.Comment:
            if child.text and child.text.strip():
                pieces.append (child.text)
        elif child.tag is ET.ProcessingInstruction:
            pass
        else:
            node.add_child (_as_node (child))
        if child.tail and child.tail.strip():
            pieces.append (child.tail)

    if not node.nodes and not pieces:
        node.set_text (element.text)                # childless - keep raw text
    else:
        node.set_text (''.join (pieces))

    return node


def parse (xmlSource) -> TreeNode:
    """
    Parses an xml document into a tree of TreeNode

    Args:
        xmlSource: either an ElementTree or Element (in memory document),
            the path of an existing xml file or a string with xml content
    Returns:
        the root TreeNode of the document
    """

    if isinstance (xmlSource, ET.ElementTree):
        element = xmlSource.getroot()

    elif isinstance (xmlSource, ET.Element):
        element = xmlSource

    elif isinstance (xmlSource, (str, os.PathLike)) and os.path.isfile (xmlSource):
        try:
            element = ET.parse (xmlSource, parser=_new_parser()).getroot()
        except (ET.ParseError, OSError, UnicodeDecodeError) as e:
            raise ParseError (f"xml file '{xmlSource}' couldn't be parsed: {e}") from e
        logger.debug (f"xml file '{xmlSource}' parsed")

    elif isinstance (xmlSource, (str, bytes)):
        try:
            element = ET.fromstring (xmlSource, parser=_new_parser())
        except ET.ParseError as e:
            raise ParseError (f"Input is neither an existing xml file nor a string in xml format: {e}") from e

    else:
        raise ParseError (f"{type(xmlSource).__name__} is not in a supported format. Input has to be "
                           "an xml document, an xml file, or a string in xml format.")

    if element is None:
        raise ParseError ("xml document is empty")

    return _as_node (element)
