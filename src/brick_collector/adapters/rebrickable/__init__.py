# Folder in charge of Rebrickable API interactions
