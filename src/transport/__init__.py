"""Remote archive transports.

This module fetches registration archives from FTP or S3 into local
temporary storage for the extraction pipeline.
"""
