#!/usr/bin/env python3
"""
Quick Start Guide for the streaming XML reader.

Shows one-shot parsing, streaming subscriptions and the bounded-memory mode.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_stream_reader import create, parse_sync
from xml_stream_reader.api import to_element_tree
from xml_stream_reader.tools import measure_parse_memory

FEED = """<?xml version="1.0"?>
<catalog>
  <book id="1"><title>My Book</title><price currency=USD>19.99</price></book>
  <book id="2"><title>Another Book</title><price currency=EUR>7.50</price></book>
</catalog>"""


def one_shot_example():
    """Parse a whole document and navigate the tree."""
    print("\n📄 Step 1: One-shot parsing")
    print("-" * 30)

    root = parse_sync(FEED)
    for book in root.find_all("book"):
        price = book.find("price")
        print(f"  {book.get_attribute('id')}: {book.find('title').text} "
              f"({price.text} {price.get_attribute('currency')})")


def streaming_example():
    """Receive each book as soon as its closing tag arrives."""
    print("\n🌊 Step 2: Streaming subscriptions")
    print("-" * 30)

    reader = create(stream=True)
    reader.on("tag:book", lambda book: print(f"  completed book {book.get_attribute('id')}"))
    reader.on("done", lambda root: print(f"  document done, {len(root.children)} children retained"))

    # Chunk boundaries never change the result
    for offset in range(0, len(FEED), 16):
        reader.parse(FEED[offset:offset + 16])


def interop_example():
    """Hand the tree to ElementTree-based code."""
    print("\n🔁 Step 3: ElementTree interop")
    print("-" * 30)

    element = to_element_tree(parse_sync(FEED))
    print(f"  ElementTree root <{element.tag}> with {len(element)} books")


def memory_example():
    """Compare retained nodes in batch and streaming mode."""
    print("\n📊 Step 4: Memory bound")
    print("-" * 30)

    feed = "<feed>" + "<entry><title>t</title></entry>" * 1000 + "</feed>"
    batch = measure_parse_memory(feed)
    streamed = measure_parse_memory(feed, {"stream": True})
    print(f"  batch peak retained nodes:     {batch.peak_retained_nodes}")
    print(f"  streaming peak retained nodes: {streamed.peak_retained_nodes}")


if __name__ == "__main__":
    print("🚀 QUICK START - Streaming XML Reader")
    print("=" * 40)
    one_shot_example()
    streaming_example()
    interop_example()
    memory_example()
