"""
# pngstash: hide data into PNG files.

A PNG file is a sequence of self-describing chunks and decoders skip the
ancillary chunks they don't know about: it's possible to stash arbitrary
data in a chunk with a custom type without altering how the image looks.

The format is described declaratively: a Chunk is a composition of fields
(see `fields.py`), each of them knowing its size, offset and raw representation.
Two basic main operations are defined for a chunk and its sub components:

 1. unpack(): the more straightforward, i.e., reading the binary data
    and build a high-level representation of that.
    Each field consumes from the stream exactly the bytes it needs.

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): trigger a recursive layout "negotiation" between a component
    and its subcomponents so to have offset and size set in the correct way.
    Packing the root of a format also implies a relayouting.

The PNG format itself lives in `images/png/`: PNGFile is the container,
PNGChunk the single chunk and ChunkType its 4 letters code.
"""
