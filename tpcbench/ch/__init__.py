"""The analytical queries of the CH-benCHmark."""