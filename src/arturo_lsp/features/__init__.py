"""
Query handlers. Each is a plain function from a DocumentAnalysis and a
position or range to lsprotocol types.
"""
