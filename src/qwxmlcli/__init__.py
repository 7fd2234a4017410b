"""qwxml command line interface"""
