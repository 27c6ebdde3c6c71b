"""
Library modules for radix85. The codec itself lives in `radix85.lib.alphabet`,
`radix85.lib.group`, and `radix85.lib.stream`; the remaining modules support the
command line interface of the units.
"""
