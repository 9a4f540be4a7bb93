"""Krantor - forward torrent and magnet files from a watch folder to put.io."""
