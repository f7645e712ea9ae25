# topmark:header:start
#
#   project      : MarcPipe
#   file         : __init__.py
#   file_relpath : src/marcpipe/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Streaming pipeline stages.

Stages are chained with ``set_receiver()``, which returns its argument::

    opener.set_receiver(MarcXmlDecoder()).set_receiver(MarcXmlEncoder()).set_receiver(sink)

Structural stages implement `marcpipe.pipeline.contracts.StreamReceiver`;
text and reader stages implement `marcpipe.pipeline.contracts.ObjectReceiver`.
"""
