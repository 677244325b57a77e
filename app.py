# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py catalogo --busca vacuna
  python app.py validar-estoque <produto_id> 2,5 --dose
  python app.py config show
  python app.py vender --api http://localhost:4000/api
"""

from vendas.adapters.cli import main

if __name__ == "__main__":
    main()
